"""API routes."""

from partsledger.api.routes.health import router as health_router
from partsledger.api.routes.jobs import router as jobs_router
from partsledger.api.routes.ledger import router as ledger_router
from partsledger.api.routes.locations import router as locations_router
from partsledger.api.routes.parts import router as parts_router

__all__ = [
    "health_router",
    "parts_router",
    "ledger_router",
    "jobs_router",
    "locations_router",
]
