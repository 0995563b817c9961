"""Pydantic schemas for review endpoints."""

from datetime import datetime

from pydantic import BaseModel, Field


class ReviewCreateRequest(BaseModel):
    # item_type and rating are range-checked by the review service
    item_type: str
    item_id: int
    rating: int
    comment: str = Field(min_length=1)
    images: list[str] = Field(default_factory=list)


class ReviewResponse(BaseModel):
    id: int
    user_id: int
    item_type: str
    item_id: int
    rating: int
    comment: str
    images: list[str]
    created_at: datetime

    model_config = {"from_attributes": True}


class ReviewListResponse(BaseModel):
    items: list[ReviewResponse]
    total: int
