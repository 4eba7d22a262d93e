# app/api/routes.py
from fastapi import APIRouter, Depends, File, Form, Request, UploadFile
from sqlalchemy.orm import Session
from typing import List, Optional
from .. import crud, schemas, services
from ..db import get_db
from ..models import User
from ..utils import logger, normalize_query
from ..web import current_user, get_geocoder, get_image_store, redirect, render

router = APIRouter()


def listing_form(
    title: str = Form(..., alias="listing[title]", min_length=1),
    description: Optional[str] = Form(None, alias="listing[description]"),
    price: int = Form(..., alias="listing[price]", ge=0),
    location: str = Form(..., alias="listing[location]", min_length=1),
    country: str = Form(..., alias="listing[country]", min_length=1),
    category: Optional[List[str]] = Form(None, alias="listing[category]"),
) -> schemas.ListingIn:
    return schemas.ListingIn(
        title=title, description=description, price=price,
        location=location, country=country, category=category,
    )


def _store_upload(store, upload: Optional[UploadFile]) -> Optional[schemas.StoredImage]:
    # browsers submit an empty file part when nothing was chosen
    if upload is None or not upload.filename:
        return None
    return store.save(upload)


@router.get("/health")
def health():
    return {"status": "ok"}


@router.get("/listings")
def index(request: Request, db: Session = Depends(get_db)):
    return render(request, "listings/index.html", {"all_listings": crud.list_listings(db)})


@router.get("/listings/new")
def new_form(request: Request, user: User = Depends(current_user)):
    return render(request, "listings/new.html")


@router.get("/listings/search")
def search(request: Request, q: str = "", db: Session = Depends(get_db)):
    element = normalize_query(q)
    if not element:
        return redirect(request, "/listings", "error", "Please enter a search query!")
    result = crud.search_listings(db, element)
    if result is None:
        return redirect(request, "/listings", "error", "No listings found based on your search!")
    if result.field == "Price":
        message = f"Listings searched by price less than Rs {element}!"
    else:
        message = f"Listings searched by {result.field}!"
    return render(request, "listings/index.html", {"all_listings": result.items}, success=message)


@router.get("/listings/filter/{tag}")
def filter_by_category(request: Request, tag: str, db: Session = Depends(get_db)):
    items = crud.filter_by_category(db, tag)
    if not items:
        return redirect(request, "/listings", "error", f"There are no listings for {tag}!")
    return render(request, "listings/index.html", {"all_listings": items},
                  success=f"Listings filtered by {tag}!")


@router.get("/listings/{id}")
def show(request: Request, id: int, db: Session = Depends(get_db)):
    listing = crud.get_listing(db, id, with_relations=True)
    if not listing:
        return redirect(request, "/listings", "error", "Listing you requested for does not exist!")
    return render(request, "listings/show.html", {"listing": listing})


@router.post("/listings")
def create(
    request: Request,
    user: User = Depends(current_user),
    payload: schemas.ListingIn = Depends(listing_form),
    image: UploadFile = File(...),
    db: Session = Depends(get_db),
    geocoder=Depends(get_geocoder),
    store=Depends(get_image_store),
):
    stored = _store_upload(store, image)
    services.create_listing(db, geocoder, payload, owner_id=user.id, image=stored)
    return redirect(request, "/listings", "success", "New listing created!")


@router.get("/listings/{id}/edit")
def edit_form(request: Request, id: int, user: User = Depends(current_user),
              db: Session = Depends(get_db), store=Depends(get_image_store)):
    listing = crud.get_listing(db, id)
    if not listing:
        return redirect(request, "/listings", "error", "Listing you are trying to edit does not exist!")
    image_url = store.preview_url(listing.image_url, width=250, height=160)
    return render(request, "listings/edit.html", {"listing": listing, "image_url": image_url})


@router.put("/listings/{id}")
@router.post("/listings/{id}")
def update(
    request: Request,
    id: int,
    user: User = Depends(current_user),
    payload: schemas.ListingIn = Depends(listing_form),
    image: Optional[UploadFile] = File(None),
    db: Session = Depends(get_db),
    geocoder=Depends(get_geocoder),
    store=Depends(get_image_store),
):
    if crud.get_listing(db, id) is None:
        return redirect(request, "/listings", "error", "Listing you are trying to edit does not exist!")
    stored = _store_upload(store, image)
    services.update_listing(db, geocoder, id, payload, image=stored)
    return redirect(request, f"/listings/{id}", "success", "Listing updated!")


@router.delete("/listings/{id}")
@router.post("/listings/{id}/delete")
def destroy(request: Request, id: int, user: User = Depends(current_user),
            db: Session = Depends(get_db)):
    if crud.delete_listing(db, id):
        logger.info("Deleted listing %s", id)
    return redirect(request, "/listings", "success", "Listing deleted!")


@router.post("/listings/{id}/reserve")
def reserve(request: Request, id: int, user: User = Depends(current_user)):
    return redirect(request, f"/listings/{id}", "success", "Reservation details sent to your email!")
