"""Job part allocation endpoints."""

from fastapi import APIRouter, Depends, Query, status

from partsledger.api.dependencies import get_job_allocator
from partsledger.application.dto.requests import AllocatePartRequest
from partsledger.application.dto.responses import (
    AllocationResponse,
    ErrorResponse,
    JobCostsResponse,
    JobPartsResponse,
)
from partsledger.core.services import JobCostAllocator

router = APIRouter(prefix="/api/jobs", tags=["jobs"])


@router.post(
    "/{job_id}/parts",
    response_model=AllocationResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        422: {"model": ErrorResponse},
    },
)
async def allocate_part(
    job_id: str,
    request: AllocatePartRequest,
    allocator: JobCostAllocator = Depends(get_job_allocator),
) -> AllocationResponse:
    """Charge a part to a job, from stock (FIFO-priced) or as a direct order."""
    allocation = await allocator.allocate(job_id=job_id, **request.model_dump())
    return AllocationResponse.model_validate(allocation)


@router.get("/{job_id}/parts", response_model=JobPartsResponse)
async def list_job_parts(
    job_id: str,
    allocator: JobCostAllocator = Depends(get_job_allocator),
) -> JobPartsResponse:
    allocations = await allocator.list_allocations(job_id)
    return JobPartsResponse(
        job_id=job_id,
        allocations=[AllocationResponse.model_validate(a) for a in allocations],
        total=len(allocations),
    )


@router.get("/{job_id}/costs", response_model=JobCostsResponse)
async def job_costs(
    job_id: str,
    allocator: JobCostAllocator = Depends(get_job_allocator),
) -> JobCostsResponse:
    """Parts cost and sell totals for a job."""
    return JobCostsResponse.model_validate(await allocator.job_costs(job_id))


@router.delete(
    "/parts/{allocation_id}",
    response_model=AllocationResponse,
    responses={404: {"model": ErrorResponse}},
)
async def remove_job_part(
    allocation_id: int,
    actor: str | None = Query(default=None),
    allocator: JobCostAllocator = Depends(get_job_allocator),
) -> AllocationResponse:
    """Remove an allocation; stock-sourced units go back on the shelf."""
    allocation = await allocator.deallocate(allocation_id, actor=actor)
    return AllocationResponse.model_validate(allocation)
