from app.models.product import Product
from app.repositories.category_repo import CategoryRepository
from tests.shop_data import CLOTHING, ELECTRONICS, MONITOR, ONESIE


def test_list_categories_with_counts(client):
    res = client.get("/api/categories")
    assert res.status_code == 200

    counts = {c["slug"]: c["product_count"] for c in res.json()}
    assert counts == {
        "clothing": 1,
        "electronics": 1,
        "feeding": 1,
        "furniture": 1,
        "toys": 1,
    }


def test_get_by_id_and_slug(client):
    assert client.get(f"/api/categories/{CLOTHING}").json()["name"] == "Clothing"
    assert client.get("/api/categories/slug/electronics").json()["id"] == ELECTRONICS
    assert client.get("/api/categories/999").status_code == 404
    assert client.get("/api/categories/slug/strollers").status_code == 404


def test_category_products(client):
    body = client.get(f"/api/categories/{ELECTRONICS}/products").json()
    assert body["total"] == 1
    assert body["products"][0]["id"] == MONITOR

    assert client.get("/api/categories/999/products").status_code == 404


def test_admin_create_generates_unique_slug(client, admin_headers):
    first = client.post(
        "/api/admin/categories", json={"name": "Bath & Care"}, headers=admin_headers
    )
    assert first.status_code == 201
    assert first.json()["slug"] == "bath-care"
    assert first.json()["product_count"] == 0

    second = client.post(
        "/api/admin/categories", json={"name": "Bath Care"}, headers=admin_headers
    )
    assert second.json()["slug"] == "bath-care-2"

    third = client.post(
        "/api/admin/categories", json={"name": "Clothing"}, headers=admin_headers
    )
    assert third.json()["slug"] == "clothing-2"


def test_deduplicated_slug_fits_the_column(client, admin_headers):
    name = "a" * 100
    slugs = [
        client.post("/api/admin/categories", json={"name": name}, headers=admin_headers).json()["slug"]
        for _ in range(3)
    ]
    assert slugs == [name, "a" * 98 + "-2", "a" * 98 + "-3"]


def test_admin_update_category(client, admin_headers):
    res = client.put(
        f"/api/admin/categories/{CLOTHING}",
        json={"description": "Onesies, rompers and socks"},
        headers=admin_headers,
    )
    assert res.status_code == 200
    assert res.json()["description"] == "Onesies, rompers and socks"
    assert res.json()["slug"] == "clothing"


def test_admin_list_is_paginated(client, admin_headers):
    body = client.get("/api/admin/categories?limit=2", headers=admin_headers).json()
    assert body["total"] == 5
    assert body["pages"] == 3
    assert len(body["categories"]) == 2


def test_deleting_category_uncategorizes_products(client, admin_headers, session):
    res = client.delete(f"/api/admin/categories/{CLOTHING}", headers=admin_headers)
    assert res.status_code == 200
    assert res.json() == {"message": "Category removed"}

    product = session.get(Product, ONESIE)
    assert product is not None
    assert product.category_id is None

    detail = client.get(f"/api/products/{ONESIE}").json()
    assert detail["category_name"] is None


def test_category_admin_requires_admin(client, customer_headers):
    res = client.post("/api/admin/categories", json={"name": "Toys"}, headers=customer_headers)
    assert res.status_code == 403


def test_repository_lists_categories_by_name(session):
    repo = CategoryRepository()
    names = [c.name for c in repo.list_all(session)]
    assert len(names) == 5
    assert names == sorted(names)
    assert [c.name for c in repo.list_all(session, skip=1, limit=2)] == names[1:3]
