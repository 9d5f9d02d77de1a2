from tests.shop_data import BOTTLES, CRIB, ONESIE


def _ids(body):
    return [p["id"] for p in body["items"]]


def test_add_is_idempotent(client, customer_headers):
    first = client.post("/api/favorites", json={"product_id": CRIB}, headers=customer_headers)
    second = client.post("/api/favorites", json={"product_id": CRIB}, headers=customer_headers)

    assert first.status_code == 200
    assert _ids(second.json()) == [CRIB]
    assert second.json()["items"][0]["category_name"] == "Furniture"


def test_add_unknown_product(client, customer_headers):
    res = client.post("/api/favorites", json={"product_id": 999}, headers=customer_headers)
    assert res.status_code == 404

    res = client.post("/api/favorites", json={}, headers=customer_headers)
    assert res.status_code == 400


def test_check_and_remove(client, customer_headers):
    client.post("/api/favorites", json={"product_id": ONESIE}, headers=customer_headers)

    res = client.get(f"/api/favorites/check/{ONESIE}", headers=customer_headers)
    assert res.json() == {"isFavorite": True}

    res = client.delete(f"/api/favorites/{ONESIE}", headers=customer_headers)
    assert res.status_code == 200
    assert res.json() == {"items": []}

    res = client.get(f"/api/favorites/check/{ONESIE}", headers=customer_headers)
    assert res.json() == {"isFavorite": False}

    assert client.delete(f"/api/favorites/{ONESIE}", headers=customer_headers).status_code == 404


def test_sync_skips_unknown_products(client, customer_headers):
    client.post("/api/favorites", json={"product_id": ONESIE}, headers=customer_headers)

    res = client.post(
        "/api/favorites/sync",
        json={"product_ids": [ONESIE, BOTTLES, 999, BOTTLES]},
        headers=customer_headers,
    )
    assert res.status_code == 200
    assert sorted(_ids(res.json())) == [ONESIE, BOTTLES]


def test_favorites_are_per_user(client, customer_headers, other_headers):
    client.post("/api/favorites", json={"product_id": ONESIE}, headers=customer_headers)
    assert client.get("/api/favorites", headers=other_headers).json() == {"items": []}


def test_favorites_require_auth(client):
    assert client.get("/api/favorites").status_code == 401
