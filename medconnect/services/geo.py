"""Great-circle helpers for the proximity searches."""
import math
from typing import Optional, Tuple

from ..core.exceptions import ValidationError

EARTH_RADIUS_KM = 6371.0
KM_PER_DEGREE_LATITUDE = 111.32

def parse_coordinates(coordinates: str) -> Tuple[float, float]:
    """Parse ``"<latitude>,<longitude>"`` into floats."""
    parts = (coordinates or "").split(",")
    if len(parts) != 2:
        raise ValidationError("Please provide coordinates as 'latitude,longitude'!")
    try:
        latitude, longitude = float(parts[0]), float(parts[1])
    except ValueError:
        raise ValidationError("Please provide coordinates as 'latitude,longitude'!")
    if not (-90 <= latitude <= 90 and -180 <= longitude <= 180):
        raise ValidationError("Coordinates are out of range!")
    return latitude, longitude

def haversine_km(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    """
    Calculate distance between two coordinates using Haversine formula
    Returns distance in kilometers
    """
    dlat = math.radians(lat2 - lat1)
    dlng = math.radians(lng2 - lng1)
    
    a = (math.sin(dlat / 2) ** 2 + 
         math.cos(math.radians(lat1)) * math.cos(math.radians(lat2)) * 
         math.sin(dlng / 2) ** 2)
    
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_KM * c

def bounding_box(latitude: float, longitude: float, radius_km: float) -> Tuple[float, float, Optional[float], Optional[float]]:
    """
    Coarse (min_lat, max_lat, min_lng, max_lng) box around a point, used to
    prefilter rows in SQL before the exact haversine check.

    Longitude bounds are ``None`` near the poles or when the box would wrap
    the antimeridian.
    """
    lat_delta = radius_km / KM_PER_DEGREE_LATITUDE
    min_lat, max_lat = latitude - lat_delta, latitude + lat_delta
    
    cos_lat = math.cos(math.radians(latitude))
    if cos_lat < 0.01:
        return min_lat, max_lat, None, None
    lng_delta = radius_km / (KM_PER_DEGREE_LATITUDE * cos_lat)
    min_lng, max_lng = longitude - lng_delta, longitude + lng_delta
    if min_lng < -180 or max_lng > 180:
        return min_lat, max_lat, None, None
    return min_lat, max_lat, min_lng, max_lng
