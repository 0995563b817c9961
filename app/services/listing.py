"""Listing service: plain CRUD over trips, hotels and vehicles."""

from typing import Any

from sqlalchemy.orm import Session

from app.errors import ForbiddenError, NotFoundError, ValidationFailedError
from app.models.listing import ItemType, RatedItem, item_model
from app.models.user import UserRole

# Derived or server-managed columns that request bodies may not set
PROTECTED_FIELDS = {"id", "owner_id", "average_rating", "created_at"}


class ListingService:
    """Creates, reads, updates and deletes listings of any item type."""

    def create(self, db: Session, item_type: ItemType, data: dict[str, Any], owner_id: int | None = None) -> RatedItem:
        model = item_model(item_type)
        values = {k: v for k, v in data.items() if k not in PROTECTED_FIELDS}
        if owner_id is not None:
            values["owner_id"] = owner_id
        item = model(**values)
        db.add(item)
        db.commit()
        db.refresh(item)
        return item

    def list_items(self, db: Session, item_type: ItemType) -> list[RatedItem]:
        model = item_model(item_type)
        return db.query(model).order_by(model.created_at.desc(), model.id.desc()).all()

    def get(self, db: Session, item_type: ItemType, item_id: int) -> RatedItem:
        """Get a listing by id or raise NotFoundError."""
        model = item_model(item_type)
        item = db.query(model).filter(model.id == item_id).first()
        if not item:
            raise NotFoundError(f"{model.__name__} not found")
        return item

    def update(self, db: Session, item: RatedItem, data: dict[str, Any]) -> RatedItem:
        """Apply a partial update. Required columns cannot be cleared."""
        columns = item.__table__.columns
        for key, value in data.items():
            if value is None and key in columns and not columns[key].nullable:
                raise ValidationFailedError(f"{key} cannot be null")
        for key, value in data.items():
            if key not in PROTECTED_FIELDS:
                setattr(item, key, value)
        db.commit()
        db.refresh(item)
        return item

    def delete(self, db: Session, item: RatedItem) -> None:
        db.delete(item)
        db.commit()

    def ensure_can_modify(self, item: RatedItem, actor_id: int, actor_role: str) -> None:
        """Only the listing's owner or an admin may change an owned listing."""
        if actor_role == UserRole.ADMIN.value:
            return
        if getattr(item, "owner_id", None) != actor_id:
            raise ForbiddenError(f"Not authorized to modify this {type(item).__name__.lower()}")


_listing_service: ListingService | None = None


def get_listing_service() -> ListingService:
    """Get singleton listing service instance."""
    global _listing_service
    if _listing_service is None:
        _listing_service = ListingService()
    return _listing_service
