# app/scripts/add_master_data_tables.py
"""Add the categories, container size and truck size tables and seed
their default rows.

Usage: python -m app.scripts.add_master_data_tables
"""

import asyncio

from app.core.db import engine
from app.constants.seed_data import (
    DEFAULT_CATEGORIES,
    DEFAULT_CONTAINER_SIZES,
    DEFAULT_TRUCK_SIZES,
)
from app.models import Category, ContainerSize, TruckSize
from app.models.enums.master_data_types import CategoryType, TruckType
from app.scripts.migration_utils import create_tables, insert_ignore
from app.core.logging import setup_logging
from app.utils.logger import get_logger

logger = get_logger(__name__)


def _category_rows():
    for name, category_type, description, order in DEFAULT_CATEGORIES:
        yield {
            "category_name": name,
            "category_type": CategoryType(category_type),
            "description": description,
            "display_order": order,
            "is_active": True,
        }


def _container_rows():
    for name, code, teu, length, width, height, max_weight, description, order in DEFAULT_CONTAINER_SIZES:
        yield {
            "size_name": name,
            "size_code": code,
            "teu_equivalent": teu,
            "length_ft": length,
            "width_ft": width,
            "height_ft": height,
            "max_weight_kg": max_weight,
            "description": description,
            "display_order": order,
            "is_active": True,
        }


def _truck_rows():
    for name, code, truck_type, capacity, length, width, height, description, order in DEFAULT_TRUCK_SIZES:
        yield {
            "size_name": name,
            "size_code": code,
            "truck_type": TruckType(truck_type),
            "capacity_tons": capacity,
            "length_ft": length,
            "width_ft": width,
            "height_ft": height,
            "description": description,
            "display_order": order,
            "is_active": True,
        }


async def run(bind_engine=engine) -> dict:
    async with bind_engine.begin() as conn:
        await create_tables(
            conn,
            [Category.__table__, ContainerSize.__table__, TruckSize.__table__],
        )

        counts = {
            "categories": await insert_ignore(conn, Category.__table__, _category_rows()),
            "container_sizes": await insert_ignore(conn, ContainerSize.__table__, _container_rows()),
            "truck_sizes": await insert_ignore(conn, TruckSize.__table__, _truck_rows()),
        }

    logger.info("Master data tables ready", extra=counts)
    return counts


if __name__ == "__main__":
    setup_logging()
    asyncio.run(run())
