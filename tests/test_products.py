from sqlmodel import select

from app.models.product import ProductImage
from tests.shop_data import BOTTLES, CLOTHING, CRIB, FEEDING, MOBILE, MONITOR, ONESIE


def _ids(products):
    return [p["id"] for p in products]


def _new_product(**overrides):
    body = {
        "name": "Knitted Romper",
        "description": "Warm knitted romper",
        "price": 29.5,
        "category_id": CLOTHING,
        "stock": 12,
        "images": ["https://cdn.example.com/romper-1.jpg", "https://cdn.example.com/romper-2.jpg"],
        "sizes": ["0-3M", "3-6M"],
        "colors": ["Cream", {"name": "Sky", "code": "#87ceeb"}],
        "care_instructions": ["Hand wash cold", "Dry flat"],
    }
    body.update(overrides)
    return body


# -------- Public listing --------


def test_list_defaults_to_newest_first(client):
    res = client.get("/api/products")
    assert res.status_code == 200

    body = res.json()
    assert body["page"] == 1
    assert body["pages"] == 1
    assert body["total"] == 5
    assert _ids(body["products"]) == [MOBILE, MONITOR, BOTTLES, CRIB, ONESIE]


def test_list_cards_carry_category_and_images(client):
    products = client.get("/api/products").json()["products"]
    crib = next(p for p in products if p["id"] == CRIB)

    assert crib["category_name"] == "Furniture"
    assert crib["image"] == "/images/products/crib1.jpg"
    assert crib["images"] == ["/images/products/crib1.jpg"]


def test_search_matches_name_and_description(client):
    assert _ids(client.get("/api/products?search=crib").json()["products"]) == [CRIB]
    assert _ids(client.get("/api/products?search=ANTI-COLIC").json()["products"]) == [BOTTLES]


def test_search_treats_wildcards_literally(client):
    for term in ("%", "_"):
        body = client.get("/api/products", params={"search": term}).json()
        assert body["total"] == 0


def test_filter_by_category_id_name_or_slug(client):
    for value in ("1", "Clothing", "clothing"):
        res = client.get("/api/products", params={"category": value})
        assert _ids(res.json()["products"]) == [ONESIE]


def test_price_range(client):
    res = client.get("/api/products?minPrice=20&maxPrice=100&sort=price,asc")
    assert _ids(res.json()["products"]) == [BOTTLES, MOBILE, MONITOR]


def test_sort_by_price(client):
    asc = _ids(client.get("/api/products?sort=price,asc").json()["products"])
    desc = _ids(client.get("/api/products?sort=price,desc").json()["products"])
    assert asc == [ONESIE, BOTTLES, MOBILE, MONITOR, CRIB]
    assert desc == list(reversed(asc))


def test_pagination(client):
    body = client.get("/api/products?limit=2&page=3").json()
    assert body["total"] == 5
    assert body["pages"] == 3
    assert _ids(body["products"]) == [ONESIE]


def test_bad_paging_is_a_validation_error(client):
    res = client.get("/api/products?limit=0")
    assert res.status_code == 400
    assert res.json()["message"] == "Validation error"


def test_shelves(client):
    assert set(_ids(client.get("/api/products/featured").json())) == {ONESIE, CRIB, MONITOR}
    assert set(_ids(client.get("/api/products/new").json())) == {ONESIE, MOBILE}
    assert _ids(client.get("/api/products/budget").json()) == [BOTTLES]
    assert _ids(client.get("/api/products/luxury").json()) == [CRIB]
    assert len(client.get("/api/products/featured?limit=1").json()) == 1


def test_related_products(client, admin_headers):
    assert client.get(f"/api/products/related/{ONESIE}").json() == []

    romper = client.post("/api/admin/products", json=_new_product(), headers=admin_headers).json()

    related = client.get(f"/api/products/related/{ONESIE}").json()
    assert _ids(related) == [romper["id"]]


def test_related_for_missing_product_is_404(client):
    assert client.get("/api/products/related/999").status_code == 404


def test_product_detail(client):
    res = client.get(f"/api/products/{MONITOR}")
    assert res.status_code == 200

    body = res.json()
    assert body["name"] == "Baby Monitor"
    assert body["category_name"] == "Electronics"
    assert body["image"] == "/images/products/monitor1.jpg"
    assert body["sizes"] == []
    assert body["colors"] == []
    assert body["care_instructions"] == []
    assert body["gallery"][0]["is_primary"] is True


def test_missing_product_is_404(client):
    res = client.get("/api/products/999")
    assert res.status_code == 404
    assert res.json() == {"message": "Product not found"}


# -------- Admin CRUD --------


def test_admin_routes_require_admin(client, customer_headers):
    res = client.post("/api/admin/products", json=_new_product(), headers=customer_headers)
    assert res.status_code == 403
    assert res.json()["message"] == "Not authorized as an admin"

    assert client.get("/api/admin/products").status_code == 401


def test_create_product_with_children(client, admin_headers):
    res = client.post("/api/admin/products", json=_new_product(), headers=admin_headers)
    assert res.status_code == 201

    body = res.json()
    assert body["name"] == "Knitted Romper"
    assert body["category_name"] == "Clothing"
    assert body["original_price"] == 29.5
    assert body["image"] == "https://cdn.example.com/romper-1.jpg"
    assert body["images"] == [
        "https://cdn.example.com/romper-1.jpg",
        "https://cdn.example.com/romper-2.jpg",
    ]
    assert [g["is_primary"] for g in body["gallery"]] == [True, False]
    assert body["sizes"] == ["0-3M", "3-6M"]
    assert body["colors"] == [
        {"name": "Cream", "code": None},
        {"name": "Sky", "code": "#87ceeb"},
    ]
    assert body["care_instructions"] == ["Hand wash cold", "Dry flat"]

    public = client.get(f"/api/products/{body['id']}").json()
    assert public["sizes"] == ["0-3M", "3-6M"]


def test_create_with_unknown_category_is_rejected(client, admin_headers):
    res = client.post(
        "/api/admin/products", json=_new_product(category_id=99), headers=admin_headers
    )
    assert res.status_code == 400
    assert client.get("/api/products").json()["total"] == 5


def test_create_validates_payload(client, admin_headers):
    res = client.post(
        "/api/admin/products", json=_new_product(price=-1), headers=admin_headers
    )
    assert res.status_code == 400
    assert res.json()["message"] == "Validation error"
    assert res.json()["errors"][0]["field"] == "price"


def test_partial_update_keeps_children(client, admin_headers):
    created = client.post("/api/admin/products", json=_new_product(), headers=admin_headers).json()

    res = client.put(
        f"/api/admin/products/{created['id']}",
        json={"price": 25.0, "stock": 3},
        headers=admin_headers,
    )
    assert res.status_code == 200

    body = res.json()
    assert body["price"] == 25.0
    assert body["stock"] == 3
    assert body["name"] == "Knitted Romper"
    assert body["images"] == created["images"]
    assert body["sizes"] == created["sizes"]


def test_update_replaces_supplied_child_lists(client, admin_headers):
    created = client.post("/api/admin/products", json=_new_product(), headers=admin_headers).json()

    body = client.put(
        f"/api/admin/products/{created['id']}",
        json={
            "images": ["https://cdn.example.com/romper-3.jpg"],
            "sizes": [],
            "category_id": FEEDING,
        },
        headers=admin_headers,
    ).json()

    assert body["images"] == ["https://cdn.example.com/romper-3.jpg"]
    assert body["gallery"][0]["is_primary"] is True
    assert body["sizes"] == []
    assert body["colors"] == created["colors"]
    assert body["category_name"] == "Feeding"


def test_update_rejects_null_flags(client, admin_headers):
    for flag in ("featured", "is_new", "is_budget", "is_luxury"):
        res = client.put(
            f"/api/admin/products/{ONESIE}", json={flag: None}, headers=admin_headers
        )
        assert res.status_code == 400
        assert res.json() == {"message": f"{flag} cannot be null"}

    res = client.put(
        f"/api/admin/products/{ONESIE}", json={"featured": False}, headers=admin_headers
    )
    assert res.status_code == 200
    assert res.json()["featured"] is False


def test_update_missing_product_is_404(client, admin_headers):
    res = client.put("/api/admin/products/999", json={"price": 1}, headers=admin_headers)
    assert res.status_code == 404


def test_delete_product_removes_images(client, admin_headers, session):
    created = client.post("/api/admin/products", json=_new_product(), headers=admin_headers).json()

    res = client.delete(f"/api/admin/products/{created['id']}", headers=admin_headers)
    assert res.status_code == 200
    assert res.json()["message"] == "Product removed"
    assert res.json()["product"]["id"] == created["id"]

    images = session.exec(
        select(ProductImage).where(ProductImage.product_id == created["id"])
    ).all()
    assert images == []
    assert client.get(f"/api/products/{created['id']}").status_code == 404


def test_admin_list_with_search(client, admin_headers):
    body = client.get("/api/admin/products?search=baby&limit=2", headers=admin_headers).json()
    assert body["total"] == 5
    assert body["pages"] == 3
    assert len(body["products"]) == 2

    detail = client.get(f"/api/admin/products/{CRIB}", headers=admin_headers).json()
    assert detail["name"] == "Baby Crib"
