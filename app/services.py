# app/services.py
from typing import Dict, Optional
from sqlalchemy.orm import Session

from . import crud, schemas
from .geocoding import GeocodingError
from .utils import logger

# Default: Delhi, India
FALLBACK_GEOMETRY = {"type": "Point", "coordinates": [77.2090, 28.6139]}

def fallback_geometry() -> Dict:
    return {"type": "Point", "coordinates": list(FALLBACK_GEOMETRY["coordinates"])}

def resolve_geometry(geocoder, query: str) -> Dict:
    """Geocode `query` to a point, using the fallback location when that fails."""
    try:
        features = geocoder.forward_geocode(query, limit=1)
    except GeocodingError as e:
        logger.error("Geocoding failed for %r: %s", query, e)
        return fallback_geometry()
    point = _first_point(features)
    if point is None:
        logger.warning("No usable geocoding result for %r, using default coordinates", query)
        return fallback_geometry()
    return {"type": "Point", "coordinates": point}

def _first_point(features):
    # [lng, lat] of the first feature, or None when it has no numeric coordinate pair
    if not features or not isinstance(features[0], dict):
        return None
    geometry = features[0].get("geometry") or {}
    coords = geometry.get("coordinates") if isinstance(geometry, dict) else None
    if not isinstance(coords, (list, tuple)) or len(coords) < 2:
        return None
    try:
        return [float(coords[0]), float(coords[1])]
    except (TypeError, ValueError):
        return None

def create_listing(db: Session, geocoder, payload: schemas.ListingIn, owner_id: Optional[int],
                   image: Optional[schemas.StoredImage]):
    geometry = resolve_geometry(geocoder, payload.location)
    obj = crud.create_listing(
        db,
        payload.model_dump(),
        owner_id=owner_id,
        image=image.model_dump() if image else None,
        geometry=geometry,
    )
    logger.info("Created listing %s", obj.id)
    return obj

def update_listing(db: Session, geocoder, listing_id: int, payload: schemas.ListingIn,
                   image: Optional[schemas.StoredImage] = None):
    updates = payload.model_dump(exclude_none=True)
    updates["geometry"] = resolve_geometry(geocoder, f"{payload.location},{payload.country}")
    obj = crud.update_listing(db, listing_id, updates=updates)
    if obj is None:
        return None
    if image is not None:
        obj = crud.set_listing_image(db, obj, image.filename, image.url)
    logger.info("Updated listing %s", listing_id)
    return obj
