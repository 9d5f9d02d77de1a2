from sqlmodel import select

from app.models.cart import CartItem
from app.models.product import Product
from tests.shop_data import BOTTLES, CRIB, CUSTOMER_ID, MOBILE, MONITOR, ONESIE


def _add(client, headers, product_id, quantity=1):
    return client.post(
        "/api/cart",
        json={"product_id": product_id, "quantity": quantity},
        headers=headers,
    )


def test_cart_requires_token(client):
    res = client.get("/api/cart")
    assert res.status_code == 401
    assert res.json() == {"message": "Not authorized, no token"}


def test_invalid_token_is_rejected(client):
    res = client.get("/api/cart", headers={"Authorization": "Bearer nope"})
    assert res.status_code == 401
    assert res.json()["message"] == "Not authorized, token failed"


def test_empty_cart(client, customer_headers):
    res = client.get("/api/cart", headers=customer_headers)
    assert res.status_code == 200
    assert res.json() == []


def test_add_returns_enriched_cart(client, customer_headers):
    res = _add(client, customer_headers, ONESIE, 2)
    assert res.status_code == 201

    items = res.json()
    assert len(items) == 1
    item = items[0]
    assert item["product_id"] == ONESIE
    assert item["quantity"] == 2
    assert item["name"] == "Baby Onesie"
    assert item["price"] == 19.99
    assert item["original_price"] == 24.99
    assert item["stock"] == 15
    assert item["image"] == "/images/products/onesie1.jpg"
    assert item["images"] == ["/images/products/onesie1.jpg"]
    assert item["category_name"] == "Clothing"


def test_adding_same_product_twice_sums_quantity(client, customer_headers, session):
    _add(client, customer_headers, BOTTLES, 2)
    res = _add(client, customer_headers, BOTTLES, 2)

    assert res.status_code == 201
    items = res.json()
    assert len(items) == 1
    assert items[0]["product_id"] == BOTTLES
    assert items[0]["quantity"] == 4

    rows = session.exec(
        select(CartItem).where(CartItem.user_id == CUSTOMER_ID, CartItem.product_id == BOTTLES)
    ).all()
    assert len(rows) == 1


def test_default_quantity_is_one(client, customer_headers):
    res = client.post("/api/cart", json={"product_id": CRIB}, headers=customer_headers)
    assert res.status_code == 201
    assert res.json()[0]["quantity"] == 1


def test_missing_product_id(client, customer_headers):
    res = client.post("/api/cart", json={"quantity": 1}, headers=customer_headers)
    assert res.status_code == 400
    assert res.json()["message"] == "Product ID is required"


def test_quantity_below_one_rejected(client, customer_headers):
    res = _add(client, customer_headers, ONESIE, 0)
    assert res.status_code == 400


def test_unknown_product(client, customer_headers):
    res = _add(client, customer_headers, 999)
    assert res.status_code == 404
    assert res.json()["message"] == "Product not found"


def test_quantity_above_stock_is_out_of_stock(client, customer_headers):
    res = _add(client, customer_headers, MOBILE, 4)
    assert res.status_code == 400
    assert res.json()["message"] == "Product is out of stock"


def test_zero_stock_product_is_out_of_stock(client, customer_headers, session):
    product = session.get(Product, MONITOR)
    product.stock = 0
    session.add(product)
    session.commit()

    res = _add(client, customer_headers, MONITOR, 1)
    assert res.status_code == 400
    assert res.json()["message"] == "Product is out of stock"


def test_merge_over_stock_leaves_cart_unchanged(client, customer_headers):
    _add(client, customer_headers, MOBILE, 2)

    res = _add(client, customer_headers, MOBILE, 2)
    assert res.status_code == 400
    assert res.json()["message"] == "Cannot add more than available stock"

    items = client.get("/api/cart", headers=customer_headers).json()
    assert items[0]["quantity"] == 2


def test_merge_up_to_exact_stock_is_allowed(client, customer_headers):
    _add(client, customer_headers, MOBILE, 1)
    res = _add(client, customer_headers, MOBILE, 2)
    assert res.status_code == 201
    assert res.json()[0]["quantity"] == 3


def test_update_quantity(client, customer_headers):
    item_id = _add(client, customer_headers, ONESIE, 1).json()[0]["id"]

    res = client.put(f"/api/cart/{item_id}", json={"quantity": 5}, headers=customer_headers)
    assert res.status_code == 200
    assert res.json()[0]["quantity"] == 5


def test_update_quantity_bounds(client, customer_headers):
    item_id = _add(client, customer_headers, MONITOR, 1).json()[0]["id"]

    for body in ({"quantity": 0}, {"quantity": -1}, {}):
        res = client.put(f"/api/cart/{item_id}", json=body, headers=customer_headers)
        assert res.status_code == 400
        assert res.json()["message"] == "Invalid quantity"

    res = client.put(f"/api/cart/{item_id}", json={"quantity": 6}, headers=customer_headers)
    assert res.status_code == 400

    res = client.put(f"/api/cart/{item_id}", json={"quantity": 5}, headers=customer_headers)
    assert res.status_code == 200
    assert res.json()[0]["quantity"] == 5


def test_update_someone_elses_item_is_404(client, customer_headers, other_headers):
    item_id = _add(client, customer_headers, ONESIE, 1).json()[0]["id"]

    res = client.put(f"/api/cart/{item_id}", json={"quantity": 2}, headers=other_headers)
    assert res.status_code == 404

    assert client.get("/api/cart", headers=customer_headers).json()[0]["quantity"] == 1


def test_remove_item(client, customer_headers):
    items = _add(client, customer_headers, ONESIE, 1).json()
    _add(client, customer_headers, CRIB, 1)

    res = client.delete(f"/api/cart/{items[0]['id']}", headers=customer_headers)
    assert res.status_code == 200
    assert [i["product_id"] for i in res.json()] == [CRIB]


def test_remove_nonexistent_or_foreign_item_is_404(client, customer_headers, other_headers):
    item_id = _add(client, customer_headers, ONESIE, 1).json()[0]["id"]

    assert client.delete("/api/cart/9999", headers=customer_headers).status_code == 404
    assert client.delete(f"/api/cart/{item_id}", headers=other_headers).status_code == 404

    assert len(client.get("/api/cart", headers=customer_headers).json()) == 1


def test_clear_only_touches_callers_cart(client, customer_headers, other_headers):
    _add(client, customer_headers, ONESIE, 1)
    _add(client, customer_headers, CRIB, 1)
    _add(client, other_headers, BOTTLES, 3)

    res = client.delete("/api/cart", headers=customer_headers)
    assert res.status_code == 200
    assert res.json() == {"message": "Cart cleared"}

    assert client.get("/api/cart", headers=customer_headers).json() == []
    other = client.get("/api/cart", headers=other_headers).json()
    assert [(i["product_id"], i["quantity"]) for i in other] == [(BOTTLES, 3)]


def test_sync_merges_and_caps_at_stock(client, customer_headers):
    _add(client, customer_headers, MOBILE, 2)

    res = client.post(
        "/api/cart/sync",
        json={
            "items": [
                {"product_id": MOBILE, "quantity": 5},
                {"product_id": ONESIE, "quantity": 1},
                {"product_id": ONESIE, "quantity": 2},
                {"product_id": 999, "quantity": 1},
            ]
        },
        headers=customer_headers,
    )
    assert res.status_code == 200

    quantities = {i["product_id"]: i["quantity"] for i in res.json()}
    assert quantities == {MOBILE: 3, ONESIE: 3}


def test_deleting_a_product_removes_it_from_carts(client, customer_headers, admin_headers):
    _add(client, customer_headers, CRIB, 1)

    assert client.delete(f"/api/admin/products/{CRIB}", headers=admin_headers).status_code == 200
    assert client.get("/api/cart", headers=customer_headers).json() == []
