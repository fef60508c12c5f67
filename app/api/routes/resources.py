"""
Resource and Survival Tip Endpoints

Read-only lookups against the static catalog. Unknown categories
return empty lists, never an error.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, Field

from app.api.dependencies import get_resource_catalog
from app.core.resources.catalog import ResourceCatalog, ResourceEntry

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Resources"])


class NearbyResourcesRequest(BaseModel):
    """Nearby resource lookup request."""

    latitude: Optional[float] = Field(default=None, examples=[40.7223])
    longitude: Optional[float] = Field(default=None, examples=[-73.9930])
    type: str = Field(
        default="",
        description="Resource category (shelters, mental_health, food, medical, tech, warmth)",
        examples=["shelters"],
    )


class NearbyResourcesResponse(BaseModel):
    """Resources for the requested category."""

    resources: list[ResourceEntry]


class SurvivalTipsResponse(BaseModel):
    """Survival tips for a category."""

    tips: list[str]


@router.post(
    "/resources/nearby",
    response_model=NearbyResourcesResponse,
    response_model_exclude_none=True,
    status_code=status.HTTP_200_OK,
    summary="Find nearby resources",
    description="Return resources for a category. Unknown categories return an empty list.",
)
async def nearby_resources(
    request: NearbyResourcesRequest,
    catalog: ResourceCatalog = Depends(get_resource_catalog),
) -> NearbyResourcesResponse:
    """Look up resources by category.

    Coordinates are accepted for clients that send them; the catalog
    is not ranked by distance yet.
    """
    resources = catalog.lookup_resources(request.type)
    if not resources:
        logger.debug(f"No resources for type={request.type!r}")

    return NearbyResourcesResponse(resources=list(resources))


@router.get(
    "/survival-tips/{category}",
    response_model=SurvivalTipsResponse,
    status_code=status.HTTP_200_OK,
    summary="Get survival tips",
    description="Return survival tips for a category. Unknown categories return an empty list.",
)
async def survival_tips(
    category: str,
    catalog: ResourceCatalog = Depends(get_resource_catalog),
) -> SurvivalTipsResponse:
    """Look up survival tips by category."""
    return SurvivalTipsResponse(tips=list(catalog.lookup_tips(category)))
