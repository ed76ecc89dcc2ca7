import pytest
from sqlalchemy import inspect, select

from app.core.db import build_engine
from app.constants.permissions import (
    APPROVAL_MATRIX_PERMISSIONS,
    APPROVAL_PERMISSIONS,
    BASE_ROLE_PERMISSIONS,
    flatten_grants,
)
from app.models.users.role_models import RolePermission
from app.scripts import add_approval_history, add_approval_matrix, add_master_data_tables, init_database


@pytest.fixture
async def fresh_engine(tmp_path):
    engine = build_engine(f"sqlite+aiosqlite:///{tmp_path / 'migrations.db'}", "sqlite")
    yield engine
    await engine.dispose()


async def _table_names(engine):
    async with engine.connect() as conn:
        return set(await conn.run_sync(lambda sync_conn: inspect(sync_conn).get_table_names()))


async def test_init_database_seeds_once(fresh_engine):
    first = await init_database.run(fresh_engine)
    second = await init_database.run(fresh_engine)

    assert first == {
        "roles": 5,
        "permissions": len(flatten_grants(BASE_ROLE_PERMISSIONS)),
        "users": 1,
        "clients": 1,
    }
    assert second == {"roles": 0, "permissions": 0, "users": 0, "clients": 0}
    assert {"users", "roles", "role_permissions", "quotations", "rfps"} <= await _table_names(fresh_engine)


async def test_master_data_migration_is_idempotent(fresh_engine):
    await init_database.run(fresh_engine)

    first = await add_master_data_tables.run(fresh_engine)
    second = await add_master_data_tables.run(fresh_engine)

    assert first == {"categories": 14, "container_sizes": 11, "truck_sizes": 14}
    assert second == {"categories": 0, "container_sizes": 0, "truck_sizes": 0}
    assert {"categories", "container_sizes", "truck_sizes"} <= await _table_names(fresh_engine)


async def test_approval_history_migration_grants_permissions(fresh_engine):
    await init_database.run(fresh_engine)

    first = await add_approval_history.run(fresh_engine)
    second = await add_approval_history.run(fresh_engine)

    assert first == {"permissions": len(APPROVAL_PERMISSIONS)}
    assert second == {"permissions": 0}
    assert "approval_history" in await _table_names(fresh_engine)

    async with fresh_engine.connect() as conn:
        rows = await conn.execute(
            select(RolePermission.role_code, RolePermission.action).where(RolePermission.module_id == "approvals")
        )
        granted = set(rows.all())

    assert ("manager", "approve") in granted
    assert ("supervisor", "approve") not in granted
    assert ("viewer", "view") in granted


async def test_migrations_keep_existing_rows(fresh_engine):
    await init_database.run(fresh_engine)
    await add_master_data_tables.run(fresh_engine)

    async with fresh_engine.begin() as conn:
        await conn.exec_driver_sql("UPDATE categories SET description = 'edited' WHERE category_name = 'Standard'")

    await add_master_data_tables.run(fresh_engine)

    async with fresh_engine.connect() as conn:
        description = (
            await conn.exec_driver_sql("SELECT description FROM categories WHERE category_name = 'Standard'")
        ).scalar_one()

    assert description == "edited"


async def test_approval_matrix_migration_is_idempotent(fresh_engine):
    await init_database.run(fresh_engine)

    first = await add_approval_matrix.run(fresh_engine)
    second = await add_approval_matrix.run(fresh_engine)

    assert first == {"permissions": len(APPROVAL_MATRIX_PERMISSIONS)}
    assert second == {"permissions": 0}
    assert {"approval_matrix", "approval_levels"} <= await _table_names(fresh_engine)

    async with fresh_engine.connect() as conn:
        rows = await conn.execute(
            select(RolePermission.role_code, RolePermission.action).where(
                RolePermission.module_id == "approval_matrix"
            )
        )
        granted = set(rows.all())

    assert ("manager", "manage") in granted
    assert ("operator", "manage") not in granted
    assert ("operator", "view") in granted
