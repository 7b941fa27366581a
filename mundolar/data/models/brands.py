from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field


class BrandResponse(BaseModel):
    """Response model for brand data."""
    id: int = Field(description="Unique brand identifier")
    name: str = Field(description="Brand name")
    image_url: Optional[str] = Field(default=None, description="Brand logo URL")
    status: Optional[str] = Field(default=None, description="Brand status flag")
    position: Optional[int] = Field(default=None, description="Display position")
