"""
Pydantic schemas for the datapoint HTTP surface.
"""

from typing import Any

from pydantic import BaseModel, Field


class DatapointPayload(BaseModel):
    """Request body for POST datapoints."""

    data: dict[str, Any] = Field(
        default_factory=dict,
        description="Datapoint parameters",
        examples=[{"siteUrl": "https://example.com/"}]
    )


class PostDataResponse(BaseModel):
    """Response schema for the post data presence endpoint."""

    postId: int = Field(..., description="Post identifier")
    hasData: bool = Field(
        ...,
        description="Whether Search Console reports clicks or impressions for the post"
    )


class HealthResponse(BaseModel):
    """Response schema for health check endpoint."""

    status: str = Field(..., description="Server health status")
    version: str = Field(..., description="API version")
    module: str = Field(..., description="Served module slug")
