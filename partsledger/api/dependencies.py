"""
Dependency injection container for FastAPI.

Provides service instances to route handlers. Tests swap these out with
``app.dependency_overrides``.
"""

from functools import lru_cache

from partsledger.application import services
from partsledger.config import Settings, get_settings
from partsledger.core.services import (
    Catalog,
    FIFOCostResolver,
    JobCostAllocator,
    Ledger,
    LocationGraph,
)


@lru_cache
def get_app_settings() -> Settings:
    """Get cached application settings."""
    return get_settings()


async def get_catalog() -> Catalog:
    return await services.get_catalog()


async def get_ledger() -> Ledger:
    return await services.get_ledger()


async def get_resolver() -> FIFOCostResolver:
    return await services.get_resolver()


async def get_location_graph() -> LocationGraph:
    return await services.get_location_graph()


async def get_job_allocator() -> JobCostAllocator:
    return await services.get_job_allocator()
