import pytest

from app.models.product import Product
from app.services.order_service import shipping_fee_for
from tests.shop_data import BOTTLES, CRIB, MOBILE, ONESIE

SHIPPING = {
    "first_name": "Grace",
    "last_name": "Wanjiru",
    "email": "grace@example.com",
    "phone": "0712345678",
    "address": "12 Ngong Road",
    "city": "Nairobi",
    "payment_method": "mpesa",
}


def _fill_cart(client, headers, *lines):
    for product_id, quantity in lines:
        res = client.post(
            "/api/cart", json={"product_id": product_id, "quantity": quantity}, headers=headers
        )
        assert res.status_code == 201


def _checkout(client, headers):
    return client.post("/api/orders", json=SHIPPING, headers=headers)


@pytest.mark.parametrize(
    "subtotal,fee",
    [(0, 0), (19.99, 350), (5000, 350), (5000.01, 0)],
)
def test_shipping_fee(subtotal, fee):
    assert shipping_fee_for(subtotal) == fee


def test_checkout_creates_order(client, customer_headers, session):
    _fill_cart(client, customer_headers, (ONESIE, 2), (BOTTLES, 1))

    res = _checkout(client, customer_headers)
    assert res.status_code == 201

    order = res.json()
    assert order["status"] == "pending"
    assert order["payment_status"] == "pending"
    assert order["country"] == "Kenya"
    assert order["order_number"].startswith("VK")
    assert order["subtotal"] == 64.97
    assert order["shipping_fee"] == 350
    assert order["tax"] == 10.4
    assert order["total"] == 425.37

    lines = {i["product_id"]: i for i in order["items"]}
    assert lines[ONESIE]["product_name"] == "Baby Onesie"
    assert lines[ONESIE]["unit_price"] == 19.99
    assert lines[ONESIE]["line_total"] == 39.98

    # stock deducted and cart emptied
    assert session.get(Product, ONESIE).stock == 13
    assert session.get(Product, BOTTLES).stock == 24
    assert client.get("/api/cart", headers=customer_headers).json() == []


def test_checkout_with_empty_cart(client, customer_headers):
    res = _checkout(client, customer_headers)
    assert res.status_code == 400
    assert res.json()["message"] == "Cart is empty"


def test_checkout_rejects_lines_over_stock(client, customer_headers, session):
    _fill_cart(client, customer_headers, (MOBILE, 3))

    product = session.get(Product, MOBILE)
    product.stock = 1
    session.add(product)
    session.commit()

    res = _checkout(client, customer_headers)
    assert res.status_code == 400
    assert res.json()["message"] == "Cart validation failed"
    assert res.json()["items"][0]["product_id"] == str(MOBILE)

    # nothing changed
    session.expire_all()
    assert session.get(Product, MOBILE).stock == 1
    assert len(client.get("/api/cart", headers=customer_headers).json()) == 1


def test_checkout_requires_shipping_details(client, customer_headers):
    _fill_cart(client, customer_headers, (ONESIE, 1))
    res = client.post("/api/orders", json={"first_name": "Grace"}, headers=customer_headers)
    assert res.status_code == 400
    assert res.json()["message"] == "Validation error"


def test_user_orders_and_visibility(client, customer_headers, other_headers, admin_headers):
    _fill_cart(client, customer_headers, (ONESIE, 1))
    order_id = _checkout(client, customer_headers).json()["id"]

    mine = client.get("/api/orders/user", headers=customer_headers).json()
    assert [o["id"] for o in mine] == [order_id]
    assert client.get("/api/orders/user", headers=other_headers).json() == []

    assert client.get(f"/api/orders/{order_id}", headers=customer_headers).status_code == 200
    assert client.get(f"/api/orders/{order_id}", headers=other_headers).status_code == 404
    assert client.get(f"/api/orders/{order_id}", headers=admin_headers).status_code == 200


def test_admin_status_transitions(client, customer_headers, admin_headers):
    _fill_cart(client, customer_headers, (CRIB, 1))
    order_id = _checkout(client, customer_headers).json()["id"]
    url = f"/api/admin/orders/{order_id}/status"

    res = client.patch(url, json={"status": "delivered"}, headers=admin_headers)
    assert res.status_code == 400

    for status in ("processing", "shipped", "delivered"):
        res = client.patch(url, json={"status": status}, headers=admin_headers)
        assert res.status_code == 200
        assert res.json()["status"] == status

    res = client.patch(url, json={"status": "cancelled"}, headers=admin_headers)
    assert res.status_code == 400


def test_cancelling_restores_stock(client, customer_headers, admin_headers, session):
    _fill_cart(client, customer_headers, (ONESIE, 4))
    order_id = _checkout(client, customer_headers).json()["id"]
    assert session.get(Product, ONESIE).stock == 11

    res = client.patch(
        f"/api/admin/orders/{order_id}/status",
        json={"status": "cancelled"},
        headers=admin_headers,
    )
    assert res.status_code == 200

    session.expire_all()
    assert session.get(Product, ONESIE).stock == 15


def test_unknown_status_is_rejected(client, customer_headers, admin_headers):
    _fill_cart(client, customer_headers, (ONESIE, 1))
    order_id = _checkout(client, customer_headers).json()["id"]

    res = client.patch(
        f"/api/admin/orders/{order_id}/status",
        json={"status": "lost"},
        headers=admin_headers,
    )
    assert res.status_code == 400


def test_admin_order_listing(client, customer_headers, admin_headers):
    _fill_cart(client, customer_headers, (ONESIE, 1))
    first = _checkout(client, customer_headers).json()["id"]
    _fill_cart(client, customer_headers, (BOTTLES, 1))
    second = _checkout(client, customer_headers).json()["id"]

    client.patch(
        f"/api/admin/orders/{first}/status",
        json={"status": "processing"},
        headers=admin_headers,
    )

    body = client.get("/api/admin/orders", headers=admin_headers).json()
    assert body["total"] == 2
    assert [o["id"] for o in body["orders"]] == [second, first]

    pending = client.get("/api/admin/orders?status=pending", headers=admin_headers).json()
    assert [o["id"] for o in pending["orders"]] == [second]

    detail = client.get(f"/api/admin/orders/{first}", headers=admin_headers).json()
    assert detail["items"][0]["product_id"] == ONESIE
    assert client.get("/api/admin/orders/999", headers=admin_headers).status_code == 404
