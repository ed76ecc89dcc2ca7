from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.db import get_db
from app.schemas.users.role_schemas import (
    RoleCreate,
    RoleUpdate,
    RoleOut,
    RolePermissionsUpdate,
    PermissionCatalogOut,
    PermissionMap,
)
from app.services.users.role_services import (
    list_roles,
    get_role,
    create_role,
    update_role,
    delete_role,
    get_permission_map,
    replace_role_permissions,
)
from app.constants.permissions import PERMISSION_CATALOG
from app.utils.check_roles import require_permission, require_role
from app.utils.get_user import get_current_user
from app.utils.response import APIResponse, success_response
from app.utils.logger import get_logger

router = APIRouter(tags=["Roles"])
logger = get_logger(__name__)


@router.get("/permissions", response_model=APIResponse[PermissionCatalogOut])
async def permission_catalog_api(user=Depends(get_current_user)):
    return success_response("Permission catalog", {"modules": PERMISSION_CATALOG})


@router.get("/roles", response_model=APIResponse[List[RoleOut]])
async def list_roles_api(
    db: AsyncSession = Depends(get_db),
    user=Depends(require_permission("roles", "view")),
):
    return success_response("Roles fetched", await list_roles(db))


@router.get("/roles/{role_code}", response_model=APIResponse[RoleOut])
async def get_role_api(
    role_code: str,
    db: AsyncSession = Depends(get_db),
    user=Depends(require_permission("roles", "view")),
):
    return success_response("Role fetched", await get_role(db, role_code))


@router.post("/roles", response_model=APIResponse[RoleOut])
async def create_role_api(
    payload: RoleCreate,
    db: AsyncSession = Depends(get_db),
    admin=Depends(require_role(["admin"])),
):
    logger.info("Create role", extra={"role_code": payload.role_code})
    return success_response("Role created successfully", await create_role(db, payload, admin))


@router.patch("/roles/{role_code}", response_model=APIResponse[RoleOut])
async def update_role_api(
    role_code: str,
    payload: RoleUpdate,
    db: AsyncSession = Depends(get_db),
    admin=Depends(require_role(["admin"])),
):
    logger.info("Update role", extra={"role_code": role_code})
    return success_response("Role updated successfully", await update_role(db, role_code, payload, admin))


@router.delete("/roles/{role_code}", response_model=APIResponse)
async def delete_role_api(
    role_code: str,
    db: AsyncSession = Depends(get_db),
    admin=Depends(require_role(["admin"])),
):
    logger.info("Delete role", extra={"role_code": role_code})
    await delete_role(db, role_code, admin)
    return success_response("Role deleted successfully")


@router.get("/roles/{role_code}/permissions", response_model=APIResponse[PermissionMap])
async def get_role_permissions_api(
    role_code: str,
    db: AsyncSession = Depends(get_db),
    user=Depends(require_permission("roles", "view")),
):
    await get_role(db, role_code)
    return success_response("Role permissions fetched", await get_permission_map(db, role_code))


@router.put("/roles/{role_code}/permissions", response_model=APIResponse[PermissionMap])
async def replace_role_permissions_api(
    role_code: str,
    payload: RolePermissionsUpdate,
    db: AsyncSession = Depends(get_db),
    admin=Depends(require_role(["admin"])),
):
    logger.info("Replace role permissions", extra={"role_code": role_code})
    permissions = await replace_role_permissions(db, role_code, payload.permissions, admin)
    return success_response("Role permissions updated successfully", permissions)
