"""Review API endpoints."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.database import get_db
from app.dependencies import CurrentUser, require_roles
from app.models.user import UserRole
from app.schemas.review import ReviewCreateRequest, ReviewListResponse, ReviewResponse
from app.services.review import get_review_service

router = APIRouter(prefix="/api/v1/reviews", tags=["Reviews"])


@router.get("/", response_model=ReviewListResponse)
def list_reviews(
    item_type: str | None = None,
    item_id: int | None = None,
    db: Session = Depends(get_db),
) -> ReviewListResponse:
    """List reviews, optionally for a single item."""
    reviews = get_review_service().list_reviews(db, item_type=item_type, item_id=item_id)
    return ReviewListResponse(
        items=[ReviewResponse.model_validate(r) for r in reviews],
        total=len(reviews),
    )


@router.post("/", response_model=ReviewResponse, status_code=201)
def create_review(
    body: ReviewCreateRequest,
    user: CurrentUser = Depends(require_roles(UserRole.USER)),
    db: Session = Depends(get_db),
) -> ReviewResponse:
    """Review a trip, hotel or car and refresh its average rating."""
    review = get_review_service().create_review(
        db,
        author_id=user.user_id,
        item_type=body.item_type,
        item_id=body.item_id,
        rating=body.rating,
        comment=body.comment,
        images=body.images,
    )
    return ReviewResponse.model_validate(review)


@router.delete("/{review_id}")
def delete_review(
    review_id: int,
    user: CurrentUser = Depends(require_roles(UserRole.USER, UserRole.ADMIN)),
    db: Session = Depends(get_db),
) -> dict:
    """Delete a review. The item's average rating is not recomputed."""
    get_review_service().delete_review(db, review_id, actor_id=user.user_id, actor_role=user.role)
    return {"detail": "Review deleted successfully"}
