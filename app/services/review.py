"""Review service: review CRUD and item rating aggregation."""

import logging

from sqlalchemy.orm import Session

from app.errors import ForbiddenError, NotFoundError, ValidationFailedError
from app.models.listing import ItemType, resolve_item
from app.models.review import Review
from app.models.user import UserRole

logger = logging.getLogger("tourism_api")

MIN_RATING = 1
MAX_RATING = 5


def parse_item_type(value: ItemType | str) -> ItemType:
    try:
        return ItemType(value)
    except ValueError:
        allowed = ", ".join(t.value for t in ItemType)
        raise ValidationFailedError(f"Invalid item type '{value}'. Allowed: {allowed}") from None


def validate_rating(rating: int) -> int:
    if isinstance(rating, bool) or not isinstance(rating, int) or not MIN_RATING <= rating <= MAX_RATING:
        raise ValidationFailedError(f"Rating must be an integer between {MIN_RATING} and {MAX_RATING}")
    return rating


class ReviewService:
    """Handles reviews and keeps each item's average rating in line with them."""

    def create_review(
        self,
        db: Session,
        author_id: int,
        item_type: ItemType | str,
        item_id: int,
        rating: int,
        comment: str,
        images: list[str] | None = None,
    ) -> Review:
        """Store a review, then recompute the reviewed item's average rating."""
        item_type = parse_item_type(item_type)
        rating = validate_rating(rating)

        if resolve_item(db, item_type, item_id) is None:
            raise NotFoundError(f"{item_type.value.capitalize()} not found")

        review = Review(
            user_id=author_id,
            item_type=item_type.value,
            item_id=item_id,
            rating=rating,
            comment=comment.strip(),
            images=images or [],
        )
        db.add(review)
        db.commit()
        db.refresh(review)

        self.recompute_average_rating(db, item_type, item_id)
        return review

    def recompute_average_rating(self, db: Session, item_type: ItemType | str, item_id: int) -> float:
        """Rewrite an item's average rating from the full set of its current reviews.

        The item row is locked for the duration on backends with row locks, so
        concurrent reviews of the same item queue up; other items are unaffected.
        """
        item_type = parse_item_type(item_type)
        item = resolve_item(db, item_type, item_id, for_update=True)
        if item is None:
            db.rollback()
            raise NotFoundError(f"{item_type.value.capitalize()} not found")

        ratings = [
            r
            for (r,) in db.query(Review.rating)
            .filter(Review.item_type == item_type.value, Review.item_id == item_id)
            .all()
        ]
        average = sum(ratings) / len(ratings) if ratings else 0.0

        item.average_rating = average
        db.commit()
        logger.info("Average rating for %s %s is now %.2f (%d reviews)", item_type.value, item_id, average, len(ratings))
        return average

    def list_reviews(
        self, db: Session, item_type: ItemType | str | None = None, item_id: int | None = None
    ) -> list[Review]:
        """List reviews, newest first, optionally for one item."""
        query = db.query(Review)
        if item_type is not None:
            query = query.filter(Review.item_type == parse_item_type(item_type).value)
        if item_id is not None:
            query = query.filter(Review.item_id == item_id)
        return query.order_by(Review.created_at.desc(), Review.id.desc()).all()

    def get_review(self, db: Session, review_id: int) -> Review | None:
        return db.query(Review).filter(Review.id == review_id).first()

    def delete_review(self, db: Session, review_id: int, actor_id: int, actor_role: str) -> None:
        """Delete a review. Only its author or an admin may do so.

        The item's average rating is left as it is until the next review for
        that item is created.
        """
        review = self.get_review(db, review_id)
        if not review:
            raise NotFoundError("Review not found")

        if review.user_id != actor_id and actor_role != UserRole.ADMIN.value:
            raise ForbiddenError("Not authorized to delete this review")

        db.delete(review)
        db.commit()


_review_service: ReviewService | None = None


def get_review_service() -> ReviewService:
    """Get singleton review service instance."""
    global _review_service
    if _review_service is None:
        _review_service = ReviewService()
    return _review_service
