"""
/index-sets: create, read, update and delete index sets, plus collection rebalancing.
Callers are assumed to be authorized upstream. IndexSetError is mapped to HTTP in app.main.
"""

from typing import Any

from fastapi import APIRouter, Depends, Response, status

from app.controllers.dependencies import get_index_set_service, get_rebalancing_controller
from app.controllers.schema.index_set import IndexSetRequest, IndexSetSummary
from app.services.index_sets import messages
from app.services.index_sets.errors import ErrorKind, IndexSetError
from app.services.index_sets.rebalancing import RebalancingController
from app.services.index_sets.service import IndexSetService

router = APIRouter(tags=["index-sets"])


@router.post("/index-sets", status_code=status.HTTP_201_CREATED, response_model=IndexSetSummary)
async def create_index_set(
    body: IndexSetRequest,
    service: IndexSetService = Depends(get_index_set_service),
) -> dict[str, Any]:
    """Create the physical indices of the index set and store its definition."""
    return await service.create_index_set(body.index_set)


@router.get("/index-sets", response_model=list[IndexSetSummary])
async def list_index_sets(service: IndexSetService = Depends(get_index_set_service)) -> list[dict[str, Any]]:
    return await service.list_index_sets()


@router.get("/index-sets/{index_set_id}", response_model=IndexSetSummary)
async def get_index_set(
    index_set_id: int,
    service: IndexSetService = Depends(get_index_set_service),
) -> dict[str, Any]:
    return await service.get_index_set(index_set_id)


@router.put("/index-sets/{index_set_id}", status_code=status.HTTP_200_OK)
async def update_index_set(
    index_set_id: int,
    body: IndexSetRequest,
    service: IndexSetService = Depends(get_index_set_service),
) -> Response:
    """Apply the definition to the existing indices, creating new ones, and store it."""
    if body.index_set.id != index_set_id:
        raise IndexSetError(ErrorKind.INVALID_DATA, messages.id_mismatch(index_set_id, body.index_set.id))
    await service.update_index_set(body.index_set)
    return Response(status_code=status.HTTP_200_OK)


@router.delete("/index-sets/{index_set_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_index_set(
    index_set_id: int,
    service: IndexSetService = Depends(get_index_set_service),
) -> Response:
    await service.delete_index_set(index_set_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/index-sets/{index_set_id}/rebalancing-collections/{concept_id}/start")
async def start_rebalancing(
    index_set_id: int,
    concept_id: str,
    controller: RebalancingController = Depends(get_rebalancing_controller),
) -> Response:
    """Mark the collection as rebalancing and create its dedicated granule index."""
    await controller.start_rebalancing(index_set_id, concept_id)
    return Response(status_code=status.HTTP_200_OK)


@router.post("/index-sets/{index_set_id}/rebalancing-collections/{concept_id}/finalize")
async def finalize_rebalancing(
    index_set_id: int,
    concept_id: str,
    controller: RebalancingController = Depends(get_rebalancing_controller),
) -> Response:
    """Mark the collection as done rebalancing. Its granule index is kept."""
    await controller.finalize_rebalancing(index_set_id, concept_id)
    return Response(status_code=status.HTTP_200_OK)


@router.post("/reset", status_code=status.HTTP_204_NO_CONTENT)
async def reset(service: IndexSetService = Depends(get_index_set_service)) -> Response:
    """Delete every index set along with its indices."""
    await service.reset()
    return Response(status_code=status.HTTP_204_NO_CONTENT)
