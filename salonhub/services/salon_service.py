"""
Salon catalog: creation, updates, soft deletion, reviews and the derived
price / rating fields.

``average_price``, ``rating`` and ``number_of_reviews`` are computed by pure
functions and written by ``save_salon`` immediately before every commit, so
the stored values always match the stored services and reviews.
"""
import logging
import math
import re
from typing import Iterable, List, Optional, Tuple
from sqlalchemy.orm import Session, selectinload
from salonhub.core.config import settings
from salonhub.core.database import commit_or_raise
from salonhub.core.exceptions import BadRequestError, NotFoundError
from salonhub.models.models import Salon, SalonReview, SalonService, ServiceCategory, Stylist
from salonhub.schemas.schemas import (
    ReviewCreate, SalonCreate, SalonUpdate, ServiceCategoryCreate, StylistBase,
)

logger = logging.getLogger(__name__)

PRICE_PATTERN = re.compile(r"\d[\d,]*(?:\.\d+)?")

# Fields that may be replaced on update but never cleared
NON_NULLABLE_FIELDS = (
    "name", "images", "location_name", "service_categories", "description", "stylists",
)


# ==================== DERIVED FIELDS ====================

def parse_price(price: Optional[str]) -> Optional[float]:
    """First numeric component of a price label ("₹1,200 onwards" -> 1200.0)"""
    if not price:
        return None
    match = PRICE_PATTERN.search(price)
    if not match:
        return None
    return float(match.group(0).replace(",", ""))


def compute_average_price(categories: Iterable, currency_symbol: str = "₹") -> str:
    """Rounded mean of every parsable service price, formatted with the currency symbol"""
    total = 0.0
    count = 0
    for category in categories:
        for service in category.services:
            price = parse_price(service.price)
            if price is not None:
                total += price
                count += 1

    if count == 0:
        return f"{currency_symbol}0"
    # half-up rounding, prices are never negative
    return f"{currency_symbol}{math.floor(total / count + 0.5)}"


def compute_rating(reviews: Iterable) -> Tuple[float, int]:
    """Return ``(rating, number_of_reviews)``; rating is the mean rounded to 1 decimal"""
    ratings = [review.rating for review in reviews]
    if not ratings:
        return 0.0, 0
    return round(sum(ratings) / len(ratings), 1), len(ratings)


def apply_derived_fields(salon: Salon, currency_symbol: str = None) -> Salon:
    salon.average_price = compute_average_price(
        salon.service_categories, currency_symbol or settings.CURRENCY_SYMBOL
    )
    salon.rating, salon.number_of_reviews = compute_rating(salon.reviews)
    return salon


def save_salon(db: Session, salon: Salon, action: str) -> Salon:
    """The single persist path for salons: recompute, commit, refresh"""
    apply_derived_fields(salon)
    db.add(salon)
    commit_or_raise(db, action)
    db.refresh(salon)
    return salon


# ==================== BUILDERS / VALIDATION ====================

def validate_service_categories(categories: List[ServiceCategoryCreate]):
    if not categories:
        raise BadRequestError("Please add at least one service category")
    for category in categories:
        if not category.name or not category.services:
            raise BadRequestError(f'Category "{category.name}" must have at least one service')


def build_categories(categories: List[ServiceCategoryCreate]) -> List[ServiceCategory]:
    return [
        ServiceCategory(
            position=index,
            name=category.name,
            icon=category.icon,
            is_active=category.is_active,
            services=[
                SalonService(position=service_index, **service.model_dump())
                for service_index, service in enumerate(category.services)
            ],
        )
        for index, category in enumerate(categories)
    ]


def build_stylists(stylists: List[StylistBase]) -> List[Stylist]:
    return [Stylist(position=index, **stylist.model_dump()) for index, stylist in enumerate(stylists)]


def build_reviews(reviews: List[ReviewCreate]) -> List[SalonReview]:
    return [SalonReview(**review.model_dump()) for review in reviews]


def dump_operating_hours(operating_hours) -> dict:
    return {day: hours.model_dump() for day, hours in operating_hours.items()}


# ==================== QUERIES ====================

def get_salon_or_404(db: Session, salon_id: str, active_only: bool = True) -> Salon:
    salon = db.query(Salon).filter(Salon.id == salon_id).first()
    if not salon:
        raise NotFoundError("Salon not found")
    if active_only and not salon.is_active:
        raise NotFoundError("Salon is not active")
    return salon


def list_salons(db: Session) -> List[Salon]:
    """Active salons, best rated first, newest first among equals"""
    return db.query(Salon).options(
        selectinload(Salon.stylists),
        selectinload(Salon.service_categories),
    ).filter(
        Salon.is_active.is_(True)
    ).order_by(Salon.rating.desc(), Salon.created_at.desc()).all()


# ==================== MUTATIONS ====================

def create_salon(db: Session, data: SalonCreate) -> Salon:
    validate_service_categories(data.service_categories)

    salon = Salon(
        name=data.name,
        images=list(data.images),
        location_name=data.location_name,
        description=data.description,
        latitude=data.location.latitude,
        longitude=data.location.longitude,
        contact_phone=data.contact.phone,
        contact_email=data.contact.email,
        contact_website=data.contact.website,
        operating_hours=dump_operating_hours(data.operating_hours),
        amenities=list(data.amenities),
        is_active=True,
    )
    salon.service_categories = build_categories(data.service_categories)
    salon.stylists = build_stylists(data.stylists)
    salon.reviews = build_reviews(data.reviews)

    save_salon(db, salon, "create salon")
    logger.info(f"Created salon {salon.id} ({salon.name})")
    return salon


def update_salon(db: Session, salon_id: str, data: SalonUpdate) -> Salon:
    """Replace the supplied fields; omitted fields keep their stored values"""
    salon = get_salon_or_404(db, salon_id, active_only=False)

    changes = data.model_dump(exclude_unset=True)
    if not changes:
        raise BadRequestError("No update fields provided")

    for field in NON_NULLABLE_FIELDS:
        if field in changes and changes[field] is None:
            raise BadRequestError(f"{field} cannot be empty")

    if "location" in changes:
        location = data.location
        if location is None or (location.latitude, location.longitude) != (salon.latitude, salon.longitude):
            raise BadRequestError("Salon location cannot be changed")

    if data.service_categories is not None:
        validate_service_categories(data.service_categories)

    # Validation is complete; nothing below can reject the request
    for field in ("name", "location_name", "description"):
        if field in changes:
            setattr(salon, field, changes[field])
    if "images" in changes:
        salon.images = list(data.images)
    if "amenities" in changes:
        salon.amenities = list(data.amenities or [])
    if "contact" in changes:
        contact = data.contact
        salon.contact_phone = contact.phone if contact else None
        salon.contact_email = contact.email if contact else None
        salon.contact_website = contact.website if contact else None
    if "operating_hours" in changes:
        salon.operating_hours = dump_operating_hours(data.operating_hours or {})
    if "service_categories" in changes:
        salon.service_categories = build_categories(data.service_categories)
    if "stylists" in changes:
        salon.stylists = build_stylists(data.stylists)
    if "reviews" in changes:
        salon.reviews = build_reviews(data.reviews or [])

    save_salon(db, salon, "update salon")
    logger.info(f"Updated salon {salon.id}: {', '.join(sorted(changes))}")
    return salon


def delete_salon(db: Session, salon_id: str) -> Salon:
    """Soft delete: the row stays, ``is_active`` goes false"""
    salon = get_salon_or_404(db, salon_id, active_only=False)
    salon.is_active = False
    save_salon(db, salon, "delete salon")
    logger.info(f"Deactivated salon {salon.id}")
    return salon


def add_review(db: Session, salon_id: str, review: ReviewCreate) -> Salon:
    salon = get_salon_or_404(db, salon_id)
    salon.reviews.append(SalonReview(**review.model_dump()))
    return save_salon(db, salon, "add review")
