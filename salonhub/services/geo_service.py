"""
Proximity search over salon coordinates.

A cheap degree-space bounding box narrows the candidates in the database,
then the exact great-circle (Haversine) distance decides membership and
ordering. All angles are handled in radians internally; inputs and outputs
are decimal degrees and kilometers.
"""
import logging
import math
from dataclasses import dataclass
from typing import List, Optional, Tuple
from sqlalchemy import or_
from sqlalchemy.orm import Session, selectinload
from salonhub.core.exceptions import BadRequestError
from salonhub.models.models import Salon
from salonhub.utils.pagination import parse_float

logger = logging.getLogger(__name__)

EARTH_RADIUS_KM = 6371.0

# Keeps points that sit exactly on the box edge from being lost to float rounding
BOX_MARGIN_DEG = 1e-9

FULL_LONGITUDE_RANGE = ((-180.0, 180.0),)


@dataclass(frozen=True)
class BoundingBox:
    min_lat: float
    max_lat: float
    lng_ranges: Tuple[Tuple[float, float], ...]

    def contains(self, latitude: float, longitude: float) -> bool:
        if not self.min_lat <= latitude <= self.max_lat:
            return False
        return any(low <= longitude <= high for low, high in self.lng_ranges)


@dataclass
class NearbySalon:
    salon: Salon
    distance: float  # km, rounded to 2 decimals


def haversine_km(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    """
    Great-circle distance in kilometers between two points given in decimal degrees.
    """
    lat1_rad, lat2_rad = math.radians(lat1), math.radians(lat2)
    dlat = math.radians(lat2 - lat1)
    dlng = math.radians(lng2 - lng1)

    a = math.sin(dlat / 2) ** 2 + math.cos(lat1_rad) * math.cos(lat2_rad) * math.sin(dlng / 2) ** 2
    a = min(1.0, max(0.0, a))
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_KM * c


def bounding_box(latitude: float, longitude: float, radius_km: float) -> BoundingBox:
    """
    Degree-space box that contains every point within ``radius_km`` of the
    given point.

    Latitude extent is ``radius / R`` converted to degrees. For longitude the
    flat-earth estimate ``lat_delta / cos(lat)`` undershoots away from the
    equator, so the exact extent ``asin(sin(radius / R) / cos(lat))`` is used
    when it is larger. Circles that reach a pole span every longitude, and
    ranges past +/-180 wrap around the antimeridian.
    """
    angular = radius_km / EARTH_RADIUS_KM
    lat_delta = math.degrees(angular)

    min_lat = latitude - lat_delta - BOX_MARGIN_DEG
    max_lat = latitude + lat_delta + BOX_MARGIN_DEG
    if min_lat <= -90.0 or max_lat >= 90.0:
        return BoundingBox(max(min_lat, -90.0), min(max_lat, 90.0), FULL_LONGITUDE_RANGE)

    cos_lat = math.cos(math.radians(latitude))
    flat_delta = lat_delta / cos_lat
    exact_delta = math.degrees(math.asin(min(1.0, math.sin(angular) / cos_lat)))
    lng_delta = max(flat_delta, exact_delta) + BOX_MARGIN_DEG

    if lng_delta >= 180.0:
        return BoundingBox(min_lat, max_lat, FULL_LONGITUDE_RANGE)

    min_lng = longitude - lng_delta
    max_lng = longitude + lng_delta
    if min_lng < -180.0:
        lng_ranges = ((min_lng + 360.0, 180.0), (-180.0, max_lng))
    elif max_lng > 180.0:
        lng_ranges = ((min_lng, 180.0), (-180.0, max_lng - 360.0))
    else:
        lng_ranges = ((min_lng, max_lng),)

    return BoundingBox(min_lat, max_lat, lng_ranges)


def parse_query_point(raw_latitude, raw_longitude) -> Tuple[float, float]:
    """Parse latitude / longitude query values, raising BadRequestError when unusable"""
    if raw_latitude in (None, "") or raw_longitude in (None, ""):
        raise BadRequestError("Please provide latitude and longitude")

    latitude = parse_float(raw_latitude)
    longitude = parse_float(raw_longitude)
    if latitude is None or longitude is None:
        raise BadRequestError("Latitude and longitude must be valid numbers")
    return latitude, longitude


def parse_radius(raw_radius, default_km: float) -> float:
    """Unparseable or missing radius falls back to ``default_km``"""
    if raw_radius in (None, ""):
        return default_km
    radius = parse_float(raw_radius)
    if radius is None:
        return default_km
    return radius


def find_nearby_salons(
    db: Session,
    latitude: Optional[float],
    longitude: Optional[float],
    radius_km: float = 5.0,
) -> List[NearbySalon]:
    """
    Active salons within ``radius_km`` of the point, nearest first, each with
    its distance rounded to 2 decimals.
    """
    if latitude is None or longitude is None:
        raise BadRequestError("Please provide latitude and longitude")
    if not -90.0 <= latitude <= 90.0:
        raise BadRequestError("Latitude must be between -90 and 90")
    if not -180.0 <= longitude <= 180.0:
        raise BadRequestError("Longitude must be between -180 and 180")
    if not math.isfinite(radius_km) or radius_km < 0:
        raise BadRequestError("Radius must be a non-negative number of kilometers")

    box = bounding_box(latitude, longitude, radius_km)
    longitude_filter = or_(*[
        Salon.longitude.between(low, high) for low, high in box.lng_ranges
    ])

    candidates = db.query(Salon).options(
        selectinload(Salon.stylists),
        selectinload(Salon.service_categories),
    ).filter(
        Salon.is_active.is_(True),
        Salon.latitude.between(box.min_lat, box.max_lat),
        longitude_filter
    ).all()

    matches = []
    for salon in candidates:
        distance = haversine_km(latitude, longitude, salon.latitude, salon.longitude)
        if distance <= radius_km:
            matches.append((distance, salon))

    matches.sort(key=lambda item: item[0])

    logger.debug(
        f"Nearby search at ({latitude}, {longitude}) r={radius_km}km: "
        f"{len(candidates)} in box, {len(matches)} within radius"
    )
    return [NearbySalon(salon=salon, distance=round(distance, 2)) for distance, salon in matches]
