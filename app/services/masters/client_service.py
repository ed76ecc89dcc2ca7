# app/services/masters/client_service.py

from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func, or_

from app.models.masters.client_models import Client
from app.schemas.masters.client_schemas import (
    ClientCreate,
    ClientUpdate,
    ClientOut,
    ClientListData,
)
from app.services.masters.master_data_helpers import (
    collect_changes,
    reload,
    versioned_update,
    log_master_data,
)
from app.core.exceptions import AppException
from app.constants.error_codes import ErrorCode
from app.constants.activity_codes import ActivityCode
from app.utils.logger import get_logger

logger = get_logger(__name__)


def _map_client(client: Client) -> ClientOut:
    return ClientOut(
        id=client.id,
        client_code=client.client_code,
        client_name=client.client_name,
        contact_person=client.contact_person,
        email=client.email,
        phone=client.phone,
        address=client.address,
        payment_terms=client.payment_terms,
        credit_limit=client.credit_limit,
        is_active=client.is_active,
        version=client.version,
        created_by=client.created_by_id,
        updated_by=client.updated_by_id,
        created_by_name=client.created_by_username,
        updated_by_name=client.updated_by_username,
        created_at=client.created_at,
        updated_at=client.updated_at,
    )


async def _get_active_client(db: AsyncSession, client_id: int) -> Client:
    client = await db.get(Client, client_id)
    if not client or not client.is_active:
        raise AppException(404, "Client not found", ErrorCode.CLIENT_NOT_FOUND)
    return client


# =========================
# CREATE
# =========================
async def create_client(db: AsyncSession, payload: ClientCreate, user) -> ClientOut:
    code = payload.client_code.strip().upper()

    exists = await db.scalar(select(Client.id).where(Client.client_code == code))
    if exists:
        raise AppException(409, "Client code already exists", ErrorCode.CLIENT_CODE_EXISTS)

    client = Client(
        **payload.model_dump(exclude={"client_code"}),
        client_code=code,
        created_by_id=user.id,
        updated_by_id=user.id,
    )
    db.add(client)
    await db.flush()

    await log_master_data(db, user, ActivityCode.CREATE_MASTER_DATA, "client", client.client_name)

    await db.commit()
    logger.info("Client created", extra={"client_id": client.id, "client_code": code})
    return _map_client(await reload(db, Client, client.id))


# =========================
# GET / LIST
# =========================
async def get_client(db: AsyncSession, client_id: int) -> ClientOut:
    return _map_client(await _get_active_client(db, client_id))


async def list_clients(
    db: AsyncSession,
    *,
    search: Optional[str] = None,
    include_inactive: bool = False,
    page: int = 1,
    page_size: int = 50,
) -> ClientListData:
    conditions = []
    if not include_inactive:
        conditions.append(Client.is_active.is_(True))
    if search:
        pattern = f"%{search}%"
        conditions.append(
            or_(
                Client.client_name.ilike(pattern),
                Client.client_code.ilike(pattern),
                Client.contact_person.ilike(pattern),
            )
        )

    total = await db.scalar(select(func.count(Client.id)).where(*conditions))
    result = await db.execute(
        select(Client)
        .where(*conditions)
        .order_by(Client.client_name.asc(), Client.id.asc())
        .offset((page - 1) * page_size)
        .limit(page_size)
    )

    return ClientListData(
        total=total or 0,
        items=[_map_client(c) for c in result.unique().scalars().all()],
    )


# =========================
# UPDATE (OPTIMISTIC)
# =========================
async def update_client(db: AsyncSession, client_id: int, payload: ClientUpdate, user) -> ClientOut:
    current = await _get_active_client(db, client_id)

    values, changes = collect_changes(current, payload)
    if not changes:
        raise AppException(400, "No changes detected", ErrorCode.VALIDATION_ERROR)

    await versioned_update(db, Client, client_id, payload.version, values, user)

    await log_master_data(
        db, user, ActivityCode.UPDATE_MASTER_DATA, "client", current.client_name,
        changes=", ".join(changes),
    )

    await db.commit()
    return _map_client(await reload(db, Client, client_id))


# =========================
# DEACTIVATE
# =========================
async def deactivate_client(db: AsyncSession, client_id: int, user) -> ClientOut:
    client = await _get_active_client(db, client_id)

    client.is_active = False
    client.updated_by_id = user.id
    client.version += 1

    await log_master_data(db, user, ActivityCode.DEACTIVATE_MASTER_DATA, "client", client.client_name)

    await db.commit()
    return _map_client(await reload(db, Client, client_id))
