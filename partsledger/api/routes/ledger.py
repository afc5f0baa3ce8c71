"""Ledger endpoints."""

from fastapi import APIRouter, Depends, status

from partsledger.api.dependencies import get_ledger
from partsledger.application.dto.requests import LedgerEntryRequest
from partsledger.application.dto.responses import ErrorResponse, LedgerEntryResponse
from partsledger.core.entities import LedgerEntry
from partsledger.core.services import Ledger

router = APIRouter(prefix="/api/ledger", tags=["ledger"])


@router.post(
    "/entries",
    response_model=LedgerEntryResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        422: {"model": ErrorResponse},
    },
)
async def append_entry(
    request: LedgerEntryRequest,
    ledger: Ledger = Depends(get_ledger),
) -> LedgerEntryResponse:
    """Append a movement (purchase, loss, adjustment, ...) to the ledger."""
    entry = await ledger.append(LedgerEntry(**request.model_dump()))
    return LedgerEntryResponse.model_validate(entry)
