# app/models.py
"""SQLAlchemy ORM models for persisted entities.

`Listing` is the record this service owns. `User` and `Review` are only
referenced: listings point at an owner and carry reviews written by users.
"""
from sqlalchemy import (
    Column, Integer, Text, Float, ForeignKey, TIMESTAMP, func, Index, UniqueConstraint,
)
from sqlalchemy.orm import relationship
from .db import Base


class User(Base):
    __tablename__ = "users"
    id = Column(Integer, primary_key=True, index=True)
    username = Column(Text, nullable=False, unique=True)
    email = Column(Text)


class Review(Base):
    __tablename__ = "reviews"
    id = Column(Integer, primary_key=True, index=True)
    comment = Column(Text)
    rating = Column(Integer)
    created_at = Column(TIMESTAMP(timezone=True), server_default=func.now())
    author_id = Column(Integer, ForeignKey("users.id"))
    listing_id = Column(Integer, ForeignKey("listings.id", ondelete="CASCADE"), nullable=False)

    author = relationship("User")


class ListingCategory(Base):
    __tablename__ = "listing_categories"
    __table_args__ = (UniqueConstraint("listing_id", "name"),)
    id = Column(Integer, primary_key=True)
    listing_id = Column(Integer, ForeignKey("listings.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(Text, nullable=False, index=True)


class Listing(Base):
    __tablename__ = "listings"
    id = Column(Integer, primary_key=True, index=True)
    title = Column(Text, nullable=False)
    description = Column(Text)
    image_filename = Column(Text)
    image_url = Column(Text)
    price = Column(Integer)
    location = Column(Text)
    country = Column(Text)
    geometry_type = Column(Text, nullable=False, default="Point")
    longitude = Column(Float)
    latitude = Column(Float)
    owner_id = Column(Integer, ForeignKey("users.id"))
    created_at = Column(TIMESTAMP(timezone=True), server_default=func.now())
    updated_at = Column(TIMESTAMP(timezone=True), server_default=func.now(), onupdate=func.now())

    owner = relationship("User")
    reviews = relationship("Review", cascade="all, delete-orphan", order_by=Review.id)
    categories = relationship("ListingCategory", cascade="all, delete-orphan", order_by=ListingCategory.id)

    @property
    def category(self):
        return [c.name for c in self.categories]

    @category.setter
    def category(self, names):
        # reuse existing rows so an unchanged tag is never deleted and re-inserted
        existing = {c.name: c for c in self.categories}
        kept = []
        for name in names or []:
            if name and name not in (c.name for c in kept):
                kept.append(existing.get(name) or ListingCategory(name=name))
        self.categories = kept

    @property
    def image(self):
        return {"filename": self.image_filename, "url": self.image_url}

    @property
    def geometry(self):
        return {"type": self.geometry_type, "coordinates": [self.longitude, self.latitude]}

    @geometry.setter
    def geometry(self, value):
        self.geometry_type = value.get("type", "Point")
        self.longitude, self.latitude = value["coordinates"][:2]

Index("idx_listings_price", Listing.price)
