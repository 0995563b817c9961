"""Trip, hotel and vehicle API endpoints."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.database import get_db
from app.dependencies import CurrentUser, require_roles
from app.errors import ForbiddenError
from app.models.listing import ItemType
from app.models.user import UserRole
from app.schemas.listing import (
    HotelCreateRequest,
    HotelResponse,
    HotelUpdateRequest,
    TripCreateRequest,
    TripResponse,
    TripUpdateRequest,
    VehicleCreateRequest,
    VehicleResponse,
    VehicleUpdateRequest,
)
from app.services.listing import get_listing_service

trips_router = APIRouter(prefix="/api/v1/trips", tags=["Trips"])
hotels_router = APIRouter(prefix="/api/v1/hotels", tags=["Hotels"])
vehicles_router = APIRouter(prefix="/api/v1/vehicles", tags=["Vehicles"])


# --- Trips ---
@trips_router.get("/", response_model=list[TripResponse])
def list_trips(db: Session = Depends(get_db)) -> list[TripResponse]:
    """List all trips."""
    return [TripResponse.model_validate(t) for t in get_listing_service().list_items(db, ItemType.TRIP)]


@trips_router.get("/{trip_id}", response_model=TripResponse)
def get_trip(trip_id: int, db: Session = Depends(get_db)) -> TripResponse:
    return TripResponse.model_validate(get_listing_service().get(db, ItemType.TRIP, trip_id))


@trips_router.post("/", response_model=TripResponse, status_code=201)
def create_trip(
    body: TripCreateRequest,
    user: CurrentUser = Depends(require_roles(UserRole.ADMIN)),
    db: Session = Depends(get_db),
) -> TripResponse:
    """Create a trip (admin only)."""
    trip = get_listing_service().create(db, ItemType.TRIP, body.model_dump())
    return TripResponse.model_validate(trip)


@trips_router.put("/{trip_id}", response_model=TripResponse)
def update_trip(
    trip_id: int,
    body: TripUpdateRequest,
    user: CurrentUser = Depends(require_roles(UserRole.ADMIN)),
    db: Session = Depends(get_db),
) -> TripResponse:
    service = get_listing_service()
    trip = service.get(db, ItemType.TRIP, trip_id)
    trip = service.update(db, trip, body.model_dump(exclude_unset=True))
    return TripResponse.model_validate(trip)


@trips_router.delete("/{trip_id}")
def delete_trip(
    trip_id: int,
    user: CurrentUser = Depends(require_roles(UserRole.ADMIN)),
    db: Session = Depends(get_db),
) -> dict:
    service = get_listing_service()
    service.delete(db, service.get(db, ItemType.TRIP, trip_id))
    return {"detail": "Trip deleted successfully"}


# --- Hotels ---
@hotels_router.get("/", response_model=list[HotelResponse])
def list_hotels(db: Session = Depends(get_db)) -> list[HotelResponse]:
    """List all hotels."""
    return [HotelResponse.model_validate(h) for h in get_listing_service().list_items(db, ItemType.HOTEL)]


@hotels_router.get("/{hotel_id}", response_model=HotelResponse)
def get_hotel(hotel_id: int, db: Session = Depends(get_db)) -> HotelResponse:
    return HotelResponse.model_validate(get_listing_service().get(db, ItemType.HOTEL, hotel_id))


@hotels_router.post("/", response_model=HotelResponse, status_code=201)
def create_hotel(
    body: HotelCreateRequest,
    user: CurrentUser = Depends(require_roles(UserRole.ADMIN)),
    db: Session = Depends(get_db),
) -> HotelResponse:
    """Create a hotel owned by the calling admin."""
    hotel = get_listing_service().create(db, ItemType.HOTEL, body.model_dump(), owner_id=user.user_id)
    return HotelResponse.model_validate(hotel)


@hotels_router.put("/{hotel_id}", response_model=HotelResponse)
def update_hotel(
    hotel_id: int,
    body: HotelUpdateRequest,
    user: CurrentUser = Depends(require_roles(UserRole.ADMIN)),
    db: Session = Depends(get_db),
) -> HotelResponse:
    service = get_listing_service()
    hotel = service.get(db, ItemType.HOTEL, hotel_id)
    service.ensure_can_modify(hotel, user.user_id, user.role)
    hotel = service.update(db, hotel, body.model_dump(exclude_unset=True))
    return HotelResponse.model_validate(hotel)


@hotels_router.delete("/{hotel_id}")
def delete_hotel(
    hotel_id: int,
    user: CurrentUser = Depends(require_roles(UserRole.ADMIN)),
    db: Session = Depends(get_db),
) -> dict:
    service = get_listing_service()
    hotel = service.get(db, ItemType.HOTEL, hotel_id)
    service.ensure_can_modify(hotel, user.user_id, user.role)
    service.delete(db, hotel)
    return {"detail": "Hotel deleted successfully"}


# --- Vehicles ---
@vehicles_router.get("/", response_model=list[VehicleResponse])
def list_vehicles(db: Session = Depends(get_db)) -> list[VehicleResponse]:
    """List all vehicles."""
    return [VehicleResponse.model_validate(v) for v in get_listing_service().list_items(db, ItemType.CAR)]


@vehicles_router.get("/{vehicle_id}", response_model=VehicleResponse)
def get_vehicle(vehicle_id: int, db: Session = Depends(get_db)) -> VehicleResponse:
    return VehicleResponse.model_validate(get_listing_service().get(db, ItemType.CAR, vehicle_id))


@vehicles_router.post("/", response_model=VehicleResponse, status_code=201)
def create_vehicle(
    body: VehicleCreateRequest,
    user: CurrentUser = Depends(require_roles(UserRole.CAR_OWNER)),
    db: Session = Depends(get_db),
) -> VehicleResponse:
    """List a vehicle for rent. New vehicles stay inactive until an admin verifies them."""
    vehicle = get_listing_service().create(db, ItemType.CAR, body.model_dump(), owner_id=user.user_id)
    return VehicleResponse.model_validate(vehicle)


@vehicles_router.put("/{vehicle_id}", response_model=VehicleResponse)
def update_vehicle(
    vehicle_id: int,
    body: VehicleUpdateRequest,
    user: CurrentUser = Depends(require_roles(UserRole.CAR_OWNER, UserRole.ADMIN)),
    db: Session = Depends(get_db),
) -> VehicleResponse:
    service = get_listing_service()
    vehicle = service.get(db, ItemType.CAR, vehicle_id)
    service.ensure_can_modify(vehicle, user.user_id, user.role)
    data = body.model_dump(exclude_unset=True)
    if data.get("status") == "active" and vehicle.status != "active" and user.role != UserRole.ADMIN.value:
        raise ForbiddenError("Only an admin can activate a vehicle")
    vehicle = service.update(db, vehicle, data)
    return VehicleResponse.model_validate(vehicle)


@vehicles_router.delete("/{vehicle_id}")
def delete_vehicle(
    vehicle_id: int,
    user: CurrentUser = Depends(require_roles(UserRole.CAR_OWNER, UserRole.ADMIN)),
    db: Session = Depends(get_db),
) -> dict:
    service = get_listing_service()
    vehicle = service.get(db, ItemType.CAR, vehicle_id)
    service.ensure_can_modify(vehicle, user.user_id, user.role)
    service.delete(db, vehicle)
    return {"detail": "Vehicle deleted successfully"}


@vehicles_router.put("/{vehicle_id}/verify", response_model=VehicleResponse)
def verify_vehicle(
    vehicle_id: int,
    user: CurrentUser = Depends(require_roles(UserRole.ADMIN)),
    db: Session = Depends(get_db),
) -> VehicleResponse:
    """Activate a vehicle listing (admin only)."""
    service = get_listing_service()
    vehicle = service.update(db, service.get(db, ItemType.CAR, vehicle_id), {"status": "active"})
    return VehicleResponse.model_validate(vehicle)
