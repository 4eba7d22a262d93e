# tests/test_crud.py
from app import crud, models
from app.utils import normalize_query, leading_int


def test_create_and_get(db, owner):
    payload = {"title": "Test Cottage", "price": 1000, "location": "Goa", "country": "India",
               "category": ["Farms", "Rooms", "Farms"]}
    obj = crud.create_listing(db, payload, owner_id=owner.id,
                              image={"filename": "listings/x.jpg", "url": "http://x/upload/listings/x.jpg"},
                              geometry={"type": "Point", "coordinates": [1.5, 2.5]})
    got = crud.get_listing(db, obj.id, with_relations=True)
    assert got is not None
    assert got.title == "Test Cottage"
    assert got.category == ["Farms", "Rooms"]
    assert got.geometry == {"type": "Point", "coordinates": [1.5, 2.5]}
    assert got.image == {"filename": "listings/x.jpg", "url": "http://x/upload/listings/x.jpg"}
    assert got.owner.username == "host"


def test_update_replaces_categories_and_keeps_shared_tags(db, make_listing):
    obj = make_listing("Villa", category=["Rooms", "Farms"])
    crud.update_listing(db, obj.id, {"category": ["Farms", "Boats"], "price": 10})
    got = crud.get_listing(db, obj.id)
    assert got.category == ["Farms", "Boats"]
    assert got.price == 10


def test_update_and_delete_missing_listing(db):
    assert crud.update_listing(db, 404, {"title": "x"}) is None
    assert crud.delete_listing(db, 404) is False


def test_delete_cascades_reviews(db, owner, make_listing):
    obj = make_listing("Cabin", category=["Camping"])
    db.add(models.Review(comment="Lovely", rating=5, author_id=owner.id, listing_id=obj.id))
    db.commit()
    assert crud.delete_listing(db, obj.id) is True
    assert db.query(models.Review).count() == 0
    assert db.query(models.ListingCategory).count() == 0


def test_filter_by_category_exact_tag(db, make_listing):
    a = make_listing("A", category=["Mountains"])
    make_listing("B", category=["Mountain Huts"])
    assert [l.id for l in crud.filter_by_category(db, "Mountains")] == [a.id]
    assert crud.filter_by_category(db, "Arctic") == []


def test_search_title_substring_unique(db, make_listing):
    make_listing("Cozy Beach Hut")
    target = make_listing("Lakeside Cabin")
    result = crud.search_listings(db, normalize_query("  lakeSIDE "))
    assert result.field == "Title"
    assert [l.id for l in result.items] == [target.id]


def test_search_title_beats_category(db, make_listing):
    by_title = make_listing("Castle View Apartment", category=["Rooms"])
    make_listing("Old Keep", category=["Castles"])
    result = crud.search_listings(db, "Castle")
    assert result.field == "Title"
    assert [l.id for l in result.items] == [by_title.id]


def test_search_falls_through_to_country_then_location(db, make_listing):
    first = make_listing("Flat", location="Lisbon", country="Portugal")
    second = make_listing("Loft", location="Porto", country="Portugal")
    result = crud.search_listings(db, "Portugal")
    assert result.field == "Country"
    assert [l.id for l in result.items] == [second.id, first.id]
    result = crud.search_listings(db, "Porto")
    assert result.field == "Location"


def test_search_numeric_fallback_sorted_by_price(db, make_listing):
    a = make_listing("A", price=450)
    make_listing("B", price=900)
    c = make_listing("C", price=120)
    d = make_listing("D", price=500)
    result = crud.search_listings(db, "500")
    assert result.field == "Price"
    assert [l.id for l in result.items] == [c.id, a.id, d.id]


def test_search_category_wins_over_numeric(db, make_listing):
    tagged = make_listing("Flat", price=9000, category=["Top 100"])
    make_listing("Cheap", price=50)
    result = crud.search_listings(db, "100")
    assert result.field == "Category"
    assert [l.id for l in result.items] == [tagged.id]


def test_search_wildcards_are_literal(db, make_listing):
    make_listing("Plain")
    assert crud.search_listings(db, "%") is None
    assert crud.search_listings(db, "") is None


def test_normalize_query():
    assert normalize_query("  new   DELHI\tflat ") == "New Delhi Flat"
    assert normalize_query("   ") == ""
    assert leading_int("500") == 500
    assert leading_int("500 Rs") == 500
    assert leading_int("Rs 500") is None
