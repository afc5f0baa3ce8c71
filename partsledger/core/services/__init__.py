"""Core domain services."""

from partsledger.core.services.catalog import Catalog
from partsledger.core.services.fifo_resolver import FIFOCostResolver, resolve_fifo
from partsledger.core.services.job_allocator import JobCostAllocator
from partsledger.core.services.ledger import Ledger
from partsledger.core.services.location_graph import LocationGraph
from partsledger.core.services.projector import AggregateProjector, project
from partsledger.core.services.replenishment import recommend_min_stock

__all__ = [
    "Catalog",
    "Ledger",
    "FIFOCostResolver",
    "resolve_fifo",
    "AggregateProjector",
    "project",
    "LocationGraph",
    "JobCostAllocator",
    "recommend_min_stock",
]
