"""Parts catalog endpoints."""

from fastapi import APIRouter, Depends, Query, status

from partsledger.api.dependencies import get_app_settings, get_catalog, get_ledger, get_resolver
from partsledger.application.dto.requests import (
    CreatePartRequest,
    MinStockOverrideRequest,
    UpdatePartRequest,
)
from partsledger.application.dto.responses import (
    ConsumptionPriceResponse,
    ErrorResponse,
    LedgerEntryResponse,
    MinStockRecommendationResponse,
    PartHistoryResponse,
    PartListResponse,
    PartResponse,
)
from partsledger.config import Settings
from partsledger.core.services import Catalog, FIFOCostResolver, Ledger

router = APIRouter(prefix="/api/parts", tags=["parts"])


@router.post(
    "",
    response_model=PartResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
async def create_part(
    request: CreatePartRequest,
    catalog: Catalog = Depends(get_catalog),
) -> PartResponse:
    """Add a part to the catalog with zero stock."""
    part = await catalog.create(**request.model_dump())
    return PartResponse.model_validate(part)


@router.get("", response_model=PartListResponse)
async def list_parts(
    category: str | None = None,
    limit: int = Query(default=100, ge=1, le=1000),
    offset: int = Query(default=0, ge=0),
    catalog: Catalog = Depends(get_catalog),
) -> PartListResponse:
    parts = await catalog.list_parts(category=category, limit=limit, offset=offset)
    return PartListResponse(
        parts=[PartResponse.model_validate(p) for p in parts],
        total=len(parts),
    )


@router.get("/low-stock", response_model=PartListResponse)
async def low_stock(catalog: Catalog = Depends(get_catalog)) -> PartListResponse:
    """Parts below their reorder threshold."""
    parts = await catalog.low_stock()
    return PartListResponse(
        parts=[PartResponse.model_validate(p) for p in parts],
        total=len(parts),
    )


@router.get("/search", response_model=PartListResponse)
async def search_parts(
    q: str = Query(default="", max_length=100),
    limit: int = Query(default=50, ge=1, le=200),
    catalog: Catalog = Depends(get_catalog),
) -> PartListResponse:
    """Case-insensitive match on part code, description or brand."""
    parts = await catalog.search(q, limit=limit)
    return PartListResponse(
        parts=[PartResponse.model_validate(p) for p in parts],
        total=len(parts),
    )


@router.get(
    "/{part_code}",
    response_model=PartResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_part(part_code: str, catalog: Catalog = Depends(get_catalog)) -> PartResponse:
    return PartResponse.model_validate(await catalog.get(part_code))


@router.patch(
    "/{part_code}",
    response_model=PartResponse,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def update_part(
    part_code: str,
    request: UpdatePartRequest,
    catalog: Catalog = Depends(get_catalog),
) -> PartResponse:
    """Change descriptive fields; only the fields sent are touched."""
    part = await catalog.update(part_code, **request.model_dump(exclude_unset=True))
    return PartResponse.model_validate(part)


@router.delete(
    "/{part_code}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
async def delete_part(part_code: str, catalog: Catalog = Depends(get_catalog)) -> None:
    """Delete a part that has no ledger history and no allocations."""
    await catalog.delete(part_code)


@router.get(
    "/{part_code}/history",
    response_model=PartHistoryResponse,
    responses={404: {"model": ErrorResponse}},
)
async def part_history(
    part_code: str,
    limit: int | None = Query(default=None, ge=1),
    ledger: Ledger = Depends(get_ledger),
    settings: Settings = Depends(get_app_settings),
) -> PartHistoryResponse:
    """Ledger entries for a part, oldest first.

    Without ``limit`` the most recent ``ledger.history_limit`` entries are returned.
    """
    if limit is None:
        limit = settings.ledger.history_limit
    entries = await ledger.history(part_code, limit=limit)
    return PartHistoryResponse(
        part_code=part_code.strip().upper(),
        entries=[LedgerEntryResponse.model_validate(e) for e in entries],
        total=len(entries),
    )


@router.get(
    "/{part_code}/fifo",
    response_model=ConsumptionPriceResponse,
    responses={404: {"model": ErrorResponse}},
)
async def fifo_preview(
    part_code: str,
    quantity: int = Query(..., gt=0),
    resolver: FIFOCostResolver = Depends(get_resolver),
) -> ConsumptionPriceResponse:
    """Price a hypothetical consumption without writing anything."""
    price = await resolver.price_consumption(part_code, quantity)
    return ConsumptionPriceResponse.model_validate(price)


@router.get(
    "/{part_code}/min-stock/recommendation",
    response_model=MinStockRecommendationResponse,
    responses={404: {"model": ErrorResponse}},
)
async def min_stock_recommendation(
    part_code: str,
    catalog: Catalog = Depends(get_catalog),
) -> MinStockRecommendationResponse:
    """Reorder threshold suggested by recent consumption."""
    recommendation = await catalog.recommend_min_stock(part_code)
    return MinStockRecommendationResponse.model_validate(recommendation)


@router.put(
    "/{part_code}/min-stock/override",
    response_model=PartResponse,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def override_min_stock(
    part_code: str,
    request: MinStockOverrideRequest,
    catalog: Catalog = Depends(get_catalog),
) -> PartResponse:
    part = await catalog.override_min_stock(part_code, request.min_stock, reason=request.reason)
    return PartResponse.model_validate(part)
