# app/schemas.py
from pydantic import BaseModel, Field
from typing import List, Optional

class ListingIn(BaseModel):
    """Fields a user submits through the listing forms."""
    title: str = Field(..., min_length=1)
    description: Optional[str] = None
    price: int = Field(..., ge=0)
    location: str = Field(..., min_length=1)
    country: str = Field(..., min_length=1)
    category: Optional[List[str]] = None

class StoredImage(BaseModel):
    filename: str
    url: str
