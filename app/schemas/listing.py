"""Pydantic schemas for trip, hotel and vehicle endpoints."""

from datetime import date, datetime
from typing import Literal

from pydantic import BaseModel, Field, model_validator

TripType = Literal["weekly", "customized", "corporate"]
TripStatus = Literal["upcoming", "ongoing", "completed", "cancelled"]
HotelStatus = Literal["available", "unavailable"]
VehicleType = Literal["sedan", "suv", "van", "luxury"]
VehicleStatus = Literal["active", "inactive", "maintenance"]


# --- Trips ---
class TripCreateRequest(BaseModel):
    title: str = Field(min_length=1)
    description: str = Field(min_length=1)
    destination: str = Field(min_length=1)
    duration: int = Field(gt=0)
    price: float = Field(ge=0)
    trip_type: TripType
    start_date: date
    end_date: date
    max_participants: int = Field(gt=0)
    status: TripStatus = "upcoming"

    @model_validator(mode="after")
    def check_dates(self) -> "TripCreateRequest":
        if self.end_date < self.start_date:
            raise ValueError("end_date must not be before start_date")
        return self


class TripUpdateRequest(BaseModel):
    title: str | None = Field(default=None, min_length=1)
    description: str | None = Field(default=None, min_length=1)
    destination: str | None = Field(default=None, min_length=1)
    duration: int | None = Field(default=None, gt=0)
    price: float | None = Field(default=None, ge=0)
    trip_type: TripType | None = None
    start_date: date | None = None
    end_date: date | None = None
    max_participants: int | None = Field(default=None, gt=0)
    current_participants: int | None = Field(default=None, ge=0)
    status: TripStatus | None = None


class TripResponse(BaseModel):
    id: int
    title: str
    description: str
    destination: str
    duration: int
    price: float
    trip_type: str
    start_date: date
    end_date: date
    max_participants: int
    current_participants: int
    average_rating: float
    status: str
    created_at: datetime

    model_config = {"from_attributes": True}


# --- Hotels ---
class HotelCreateRequest(BaseModel):
    name: str = Field(min_length=1)
    description: str = Field(min_length=1)
    address: str | None = None
    city: str | None = None
    country: str | None = None
    price_per_night: float = Field(ge=0)
    amenities: list[str] = Field(default_factory=list)
    status: HotelStatus = "available"


class HotelUpdateRequest(BaseModel):
    name: str | None = Field(default=None, min_length=1)
    description: str | None = Field(default=None, min_length=1)
    address: str | None = None
    city: str | None = None
    country: str | None = None
    price_per_night: float | None = Field(default=None, ge=0)
    amenities: list[str] | None = None
    status: HotelStatus | None = None


class HotelResponse(BaseModel):
    id: int
    owner_id: int
    name: str
    description: str
    address: str | None
    city: str | None
    country: str | None
    price_per_night: float
    amenities: list[str]
    average_rating: float
    status: str
    created_at: datetime

    model_config = {"from_attributes": True}


# --- Vehicles ---
class VehicleCreateRequest(BaseModel):
    make: str = Field(min_length=1)
    model: str = Field(min_length=1)
    year: int = Field(ge=1900)
    vehicle_type: VehicleType
    seats: int = Field(gt=0)
    price_per_day: float = Field(ge=0)
    features: list[str] = Field(default_factory=list)
    city: str | None = None
    address: str | None = None


class VehicleUpdateRequest(BaseModel):
    make: str | None = Field(default=None, min_length=1)
    model: str | None = Field(default=None, min_length=1)
    year: int | None = Field(default=None, ge=1900)
    vehicle_type: VehicleType | None = None
    seats: int | None = Field(default=None, gt=0)
    price_per_day: float | None = Field(default=None, ge=0)
    features: list[str] | None = None
    city: str | None = None
    address: str | None = None
    status: VehicleStatus | None = None


class VehicleResponse(BaseModel):
    id: int
    owner_id: int
    make: str
    model: str
    year: int
    vehicle_type: str
    seats: int
    price_per_day: float
    features: list[str]
    city: str | None
    address: str | None
    average_rating: float
    status: str
    created_at: datetime

    model_config = {"from_attributes": True}
