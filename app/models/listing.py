"""Listing models: trips, hotels and vehicles.

All three carry an ``average_rating`` that is derived from their reviews and
rewritten by the review service; it is never edited through the listing
endpoints.
"""

import enum
from datetime import datetime

from sqlalchemy import JSON, Column, Date, DateTime, Float, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Session

from app.database import Base


class ItemType(str, enum.Enum):
    """Kinds of listing a review can point at."""

    TRIP = "trip"
    HOTEL = "hotel"
    CAR = "car"


class Trip(Base):
    """Organised trip sold by the agency."""

    __tablename__ = "trip"

    id = Column(Integer, primary_key=True, autoincrement=True)
    title = Column(String(256), nullable=False)
    description = Column(Text, nullable=False)
    destination = Column(String(256), nullable=False)
    duration = Column(Integer, nullable=False)
    price = Column(Float, nullable=False)
    trip_type = Column(String(32), nullable=False)  # weekly, customized, corporate
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False)
    max_participants = Column(Integer, nullable=False)
    current_participants = Column(Integer, nullable=False, default=0)
    average_rating = Column(Float, nullable=False, default=0.0)
    status = Column(String(32), nullable=False, default="upcoming")  # upcoming, ongoing, completed, cancelled
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)


class Hotel(Base):
    """Hotel listing."""

    __tablename__ = "hotel"

    id = Column(Integer, primary_key=True, autoincrement=True)
    owner_id = Column(Integer, ForeignKey("user.id"), nullable=False, index=True)
    name = Column(String(256), nullable=False)
    description = Column(Text, nullable=False)
    address = Column(String(512), nullable=True)
    city = Column(String(128), nullable=True)
    country = Column(String(128), nullable=True)
    price_per_night = Column(Float, nullable=False)
    amenities = Column(JSON, nullable=False, default=list)
    average_rating = Column(Float, nullable=False, default=0.0)
    status = Column(String(32), nullable=False, default="available")
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)


class Vehicle(Base):
    """Rental car listed by a car owner."""

    __tablename__ = "vehicle"

    id = Column(Integer, primary_key=True, autoincrement=True)
    owner_id = Column(Integer, ForeignKey("user.id"), nullable=False, index=True)
    make = Column(String(128), nullable=False)
    model = Column(String(128), nullable=False)
    year = Column(Integer, nullable=False)
    vehicle_type = Column(String(32), nullable=False)  # sedan, suv, van, luxury
    seats = Column(Integer, nullable=False)
    price_per_day = Column(Float, nullable=False)
    features = Column(JSON, nullable=False, default=list)
    city = Column(String(128), nullable=True)
    address = Column(String(512), nullable=True)
    average_rating = Column(Float, nullable=False, default=0.0)
    status = Column(String(32), nullable=False, default="inactive")  # active, inactive, maintenance
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)


RatedItem = Trip | Hotel | Vehicle


def item_model(item_type: ItemType) -> type[Trip] | type[Hotel] | type[Vehicle]:
    """Return the model class behind an item type tag."""
    item_type = ItemType(item_type)
    if item_type is ItemType.TRIP:
        return Trip
    if item_type is ItemType.HOTEL:
        return Hotel
    return Vehicle


def resolve_item(db: Session, item_type: ItemType, item_id: int, for_update: bool = False) -> RatedItem | None:
    """Load the listing a review points at, or None if it does not exist."""
    model = item_model(item_type)
    query = db.query(model).filter(model.id == item_id)
    if for_update:
        query = query.with_for_update()
    return query.first()
