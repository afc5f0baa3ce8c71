"""Storage location endpoints."""

from fastapi import APIRouter, Depends, status

from partsledger.api.dependencies import get_location_graph
from partsledger.application.dto.requests import (
    CreateLocationRequest,
    MoveLocationRequest,
    SetLocationActiveRequest,
    TransferPartRequest,
)
from partsledger.application.dto.responses import (
    ErrorResponse,
    LedgerEntryResponse,
    LocationPathResponse,
    LocationResponse,
)
from partsledger.core.services import LocationGraph

router = APIRouter(prefix="/api/locations", tags=["locations"])


@router.post(
    "",
    response_model=LocationResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
    },
)
async def create_location(
    request: CreateLocationRequest,
    graph: LocationGraph = Depends(get_location_graph),
) -> LocationResponse:
    location = await graph.create_location(**request.model_dump())
    return LocationResponse.model_validate(location)


@router.get("", response_model=list[LocationResponse])
async def list_locations(
    active_only: bool = True,
    graph: LocationGraph = Depends(get_location_graph),
) -> list[LocationResponse]:
    locations = await graph.list_locations(active_only=active_only)
    return [LocationResponse.model_validate(loc) for loc in locations]


@router.post(
    "/transfers",
    response_model=LedgerEntryResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def transfer_part(
    request: TransferPartRequest,
    graph: LocationGraph = Depends(get_location_graph),
) -> LedgerEntryResponse:
    """Move a part between locations; recorded as a Transfer ledger entry."""
    entry = await graph.transfer(**request.model_dump())
    return LedgerEntryResponse.model_validate(entry)


@router.get(
    "/{code}",
    response_model=LocationResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_location(
    code: str,
    graph: LocationGraph = Depends(get_location_graph),
) -> LocationResponse:
    return LocationResponse.model_validate(await graph.get_location(code))


@router.get(
    "/{code}/children",
    response_model=list[LocationResponse],
    responses={404: {"model": ErrorResponse}},
)
async def location_children(
    code: str,
    graph: LocationGraph = Depends(get_location_graph),
) -> list[LocationResponse]:
    return [LocationResponse.model_validate(loc) for loc in await graph.children(code)]


@router.get(
    "/{code}/path",
    response_model=LocationPathResponse,
    responses={404: {"model": ErrorResponse}},
)
async def location_path(
    code: str,
    graph: LocationGraph = Depends(get_location_graph),
) -> LocationPathResponse:
    """Ancestry from the root, e.g. Shop > Shelf A > Crate 3."""
    path = await graph.resolve_ancestry_path(code)
    return LocationPathResponse(
        code=path[-1].code,
        path=[LocationResponse.model_validate(loc) for loc in path],
        display=" > ".join(loc.name for loc in path),
    )


@router.put(
    "/{code}/parent",
    response_model=LocationResponse,
    responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
async def move_location(
    code: str,
    request: MoveLocationRequest,
    graph: LocationGraph = Depends(get_location_graph),
) -> LocationResponse:
    """Re-parent a location. Moves that would create a cycle are rejected."""
    location = await graph.move_location(code, request.parent_code)
    return LocationResponse.model_validate(location)


@router.put(
    "/{code}/active",
    response_model=LocationResponse,
    responses={404: {"model": ErrorResponse}},
)
async def set_location_active(
    code: str,
    request: SetLocationActiveRequest,
    graph: LocationGraph = Depends(get_location_graph),
) -> LocationResponse:
    location = await graph.set_active(code, request.active)
    return LocationResponse.model_validate(location)
