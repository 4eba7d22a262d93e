# app/crud.py
"""CRUD operations for `Listing` entities.

This module provides create, read, update, and delete helpers plus the
category filter and the prioritized field search used by the listing views.
"""
from sqlalchemy.orm import Session, selectinload
from .models import Listing, ListingCategory, Review
from .utils import escape_like, leading_int
from typing import Dict, Any, List, Optional, NamedTuple

def get_listing(db: Session, listing_id: int, with_relations: bool = False):
    q = db.query(Listing)
    if with_relations:
        q = q.options(
            selectinload(Listing.reviews).selectinload(Review.author),
            selectinload(Listing.owner),
        )
    return q.filter(Listing.id == listing_id).first()

def list_listings(db: Session) -> List[Listing]:
    return db.query(Listing).order_by(Listing.id).all()

def create_listing(db: Session, data: Dict[str, Any], owner_id: Optional[int] = None,
                   image: Optional[Dict[str, str]] = None, geometry: Optional[Dict] = None):
    data = dict(data)
    categories = data.pop("category", None) or []
    obj = Listing(**data)
    obj.category = categories
    obj.owner_id = owner_id
    if image:
        obj.image_filename = image["filename"]
        obj.image_url = image["url"]
    if geometry:
        obj.geometry = geometry
    db.add(obj)
    db.commit()
    db.refresh(obj)
    return obj

def update_listing(db: Session, listing_id: int, updates: Dict[str, Any]):
    obj = db.query(Listing).filter(Listing.id == listing_id).first()
    if not obj:
        return None
    for k, v in updates.items():
        setattr(obj, k, v)
    db.commit()
    db.refresh(obj)
    return obj

def set_listing_image(db: Session, obj: Listing, filename: str, url: str):
    obj.image_filename = filename
    obj.image_url = url
    db.commit()
    db.refresh(obj)
    return obj

def delete_listing(db: Session, listing_id: int):
    obj = db.query(Listing).filter(Listing.id == listing_id).first()
    if not obj:
        return False
    db.delete(obj)
    db.commit()
    return True

def filter_by_category(db: Session, tag: str) -> List[Listing]:
    return (
        db.query(Listing)
        .filter(Listing.categories.any(ListingCategory.name == tag))
        .order_by(Listing.id)
        .all()
    )


class SearchField(NamedTuple):
    label: str
    matcher: Any      # callable(pattern) -> SQL clause
    order_by: Any


# Evaluated top to bottom; the first field with any match wins.
SEARCH_FIELDS = [
    SearchField("Title", lambda p: Listing.title.ilike(p, escape="\\"), Listing.id.asc()),
    SearchField("Category", lambda p: Listing.categories.any(ListingCategory.name.ilike(p, escape="\\")),
                Listing.id.desc()),
    SearchField("Country", lambda p: Listing.country.ilike(p, escape="\\"), Listing.id.desc()),
    SearchField("Location", lambda p: Listing.location.ilike(p, escape="\\"), Listing.id.desc()),
]


class SearchResult(NamedTuple):
    field: str
    items: List[Listing]


def search_listings(db: Session, query: str) -> Optional[SearchResult]:
    """Search an already-normalized query across fields in priority order.

    Falls back to ``price <= n`` (ascending) when no text field matches and the
    query starts with an integer. Returns None when nothing matches.
    """
    if not query:
        return None
    pattern = f"%{escape_like(query)}%"
    for field in SEARCH_FIELDS:
        items = db.query(Listing).filter(field.matcher(pattern)).order_by(field.order_by).all()
        if items:
            return SearchResult(field.label, items)
    limit = leading_int(query)
    if limit is not None:
        items = (
            db.query(Listing)
            .filter(Listing.price <= limit)
            .order_by(Listing.price.asc(), Listing.id.asc())
            .all()
        )
        if items:
            return SearchResult("Price", items)
    return None
