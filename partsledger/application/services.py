"""
Service factory functions for dependency injection.

Wires the SQLite unit of work into the core services. Services are
singletons bound to the global connection pool; tests pass their own
``uow_factory`` instead.
"""

from partsledger.config import get_settings
from partsledger.core.interfaces import IJobDirectory, UnitOfWorkFactory
from partsledger.core.services import (
    AggregateProjector,
    Catalog,
    FIFOCostResolver,
    JobCostAllocator,
    Ledger,
    LocationGraph,
)

# Singleton service instances
_uow_factory: UnitOfWorkFactory | None = None
_catalog: Catalog | None = None
_ledger: Ledger | None = None
_resolver: FIFOCostResolver | None = None
_location_graph: LocationGraph | None = None
_job_allocator: JobCostAllocator | None = None


async def get_uow_factory() -> UnitOfWorkFactory:
    """Unit-of-work factory over the global connection pool."""
    global _uow_factory
    if _uow_factory is None:
        # Lazy import infrastructure to keep core importable without it
        from partsledger.infrastructure.storage.sqlite import get_pool, sqlite_uow_factory

        _uow_factory = sqlite_uow_factory(await get_pool())
    return _uow_factory


async def get_catalog(uow_factory: UnitOfWorkFactory | None = None) -> Catalog:
    global _catalog
    if uow_factory is not None:
        ledger_settings = get_settings().ledger
        return Catalog(
            uow_factory,
            AggregateProjector(),
            default_markup_percent=ledger_settings.default_markup_percent,
            lead_time_days=ledger_settings.lead_time_days,
            order_cycle_days=ledger_settings.order_cycle_days,
            usage_window_days=ledger_settings.usage_window_days,
        )
    if _catalog is None:
        _catalog = await get_catalog(await get_uow_factory())
    return _catalog


async def get_ledger(uow_factory: UnitOfWorkFactory | None = None) -> Ledger:
    global _ledger
    if uow_factory is not None:
        return Ledger(uow_factory, AggregateProjector())
    if _ledger is None:
        _ledger = await get_ledger(await get_uow_factory())
    return _ledger


async def get_resolver(uow_factory: UnitOfWorkFactory | None = None) -> FIFOCostResolver:
    global _resolver
    if uow_factory is not None:
        return FIFOCostResolver(uow_factory)
    if _resolver is None:
        _resolver = await get_resolver(await get_uow_factory())
    return _resolver


async def get_location_graph(
    uow_factory: UnitOfWorkFactory | None = None,
) -> LocationGraph:
    global _location_graph
    if uow_factory is not None:
        return LocationGraph(
            uow_factory,
            await get_ledger(uow_factory),
            code_prefix=get_settings().ledger.location_code_prefix,
        )
    if _location_graph is None:
        _location_graph = await get_location_graph(await get_uow_factory())
    return _location_graph


async def get_job_allocator(
    uow_factory: UnitOfWorkFactory | None = None,
    job_directory: IJobDirectory | None = None,
) -> JobCostAllocator:
    """
    Get or create the JobCostAllocator.

    Args:
        uow_factory: Build a fresh allocator over this factory instead
        job_directory: Optional hook that rejects unknown job ids
    """
    global _job_allocator
    if uow_factory is not None or job_directory is not None:
        factory = uow_factory or await get_uow_factory()
        return JobCostAllocator(
            factory,
            await get_ledger(factory),
            await get_resolver(factory),
            job_directory=job_directory,
        )
    if _job_allocator is None:
        factory = await get_uow_factory()
        _job_allocator = JobCostAllocator(
            factory, await get_ledger(factory), await get_resolver(factory)
        )
    return _job_allocator


def reset_services() -> None:
    """Reset all singleton instances (for testing and pool shutdown)."""
    global _uow_factory, _catalog, _ledger, _resolver, _location_graph, _job_allocator
    _uow_factory = None
    _catalog = None
    _ledger = None
    _resolver = None
    _location_graph = None
    _job_allocator = None
