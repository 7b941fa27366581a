from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field


class CategoryResponse(BaseModel):
    """Response model for category data."""
    id: int = Field(description="Unique category identifier")
    name: str = Field(description="Category name")
    description: Optional[str] = Field(default=None, description="Category description")
    image_url: Optional[str] = Field(default=None, description="Category image URL")
    parent_id: Optional[int] = Field(default=None, description="Parent category (one level of nesting)")
    status: Optional[str] = Field(default=None, description="Category status flag")
    position: Optional[int] = Field(default=None, description="Display position")
