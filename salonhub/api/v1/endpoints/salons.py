from typing import Optional
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from salonhub.core.config import settings
from salonhub.core.database import get_db
from salonhub.schemas.schemas import (
    MessageResponse,
    NearbySalonResponse,
    NearbySalonsResponse,
    ReviewCreate,
    SalonCreate,
    SalonListResponse,
    SalonResponse,
    SalonSummary,
    SalonUpdate,
)
from salonhub.services import geo_service, salon_service

router = APIRouter()


@router.get("/", response_model=SalonListResponse)
def get_all_salons(db: Session = Depends(get_db)):
    """Active salons, highest rated first (public)"""
    salons = salon_service.list_salons(db)
    return {"count": len(salons), "salons": salons}


@router.get("/nearby", response_model=NearbySalonsResponse)
def get_nearby_salons(
    latitude: Optional[str] = Query(None, description="Latitude in decimal degrees"),
    longitude: Optional[str] = Query(None, description="Longitude in decimal degrees"),
    radius: Optional[str] = Query(None, description="Search radius in kilometers"),
    db: Session = Depends(get_db)
):
    """
    Salons within ``radius`` km of a point, nearest first (public).
    Radius defaults to 5 km.
    """
    lat, lng = geo_service.parse_query_point(latitude, longitude)
    radius_km = geo_service.parse_radius(radius, settings.DEFAULT_NEARBY_RADIUS_KM)

    results = geo_service.find_nearby_salons(db, lat, lng, radius_km)
    salons = [
        NearbySalonResponse(
            **SalonSummary.model_validate(result.salon).model_dump(),
            distance=result.distance
        )
        for result in results
    ]
    return NearbySalonsResponse(
        count=len(salons),
        radius_km=radius_km,
        center={"latitude": lat, "longitude": lng},
        salons=salons,
    )


@router.get("/{salon_id}", response_model=SalonResponse)
def get_salon_by_id(salon_id: str, db: Session = Depends(get_db)):
    """Full salon document including services and reviews (public)"""
    return salon_service.get_salon_or_404(db, salon_id)


@router.post("/", response_model=SalonResponse, status_code=status.HTTP_201_CREATED)
def create_salon(salon_data: SalonCreate, db: Session = Depends(get_db)):
    """Create a salon; derived price and rating are computed on save"""
    return salon_service.create_salon(db, salon_data)


@router.put("/{salon_id}", response_model=SalonResponse)
def update_salon(salon_id: str, salon_update: SalonUpdate, db: Session = Depends(get_db)):
    """Replace the supplied salon fields"""
    return salon_service.update_salon(db, salon_id, salon_update)


@router.delete("/{salon_id}", response_model=MessageResponse)
def delete_salon(salon_id: str, db: Session = Depends(get_db)):
    """Soft delete a salon"""
    salon_service.delete_salon(db, salon_id)
    return {"message": "Salon deleted successfully"}


@router.post("/{salon_id}/reviews", response_model=SalonResponse, status_code=status.HTTP_201_CREATED)
def add_salon_review(salon_id: str, review: ReviewCreate, db: Session = Depends(get_db)):
    """Post a review; the salon's rating is recomputed"""
    return salon_service.add_review(db, salon_id, review)
