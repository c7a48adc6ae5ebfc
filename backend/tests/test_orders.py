import pytest
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from models.order import Order, OrderItem


@pytest.fixture
def widget(make_product):
    return make_product()


@pytest.fixture
def ann(make_customer):
    return make_customer()


def _order(client, customer_id, *items, **extra):
    body = {"customer_id": customer_id, "items": [{"product_id": p, "quantity": q} for p, q in items]}
    body.update(extra)
    return client.post("/api/orders", json=body)


def test_widget_order_example(alice, widget, ann):
    resp = _order(alice, ann["id"], (widget["id"], 3))

    assert resp.status_code == 201
    order = resp.json()
    assert order["total_amount"] == 30.0
    assert order["status"] == "pending"
    assert order["customer_id"] == ann["id"]
    assert order["user_id"] == "alice"

    detail = alice.get(f"/api/orders/{order['id']}").json()
    assert len(detail["items"]) == 1
    item = detail["items"][0]
    assert item["unit_price"] == 10.0
    assert item["total_price"] == 30.0
    assert item["quantity"] == 3


def test_total_is_sum_of_line_items(alice, make_product, ann):
    a = make_product(name="A", price=2.5)
    b = make_product(name="B", price=19.99)
    c = make_product(name="C", price=0)

    order = _order(alice, ann["id"], (a["id"], 4), (b["id"], 2), (c["id"], 7)).json()
    detail = alice.get(f"/api/orders/{order['id']}").json()

    for item in detail["items"]:
        assert item["total_price"] == pytest.approx(item["unit_price"] * item["quantity"])
    assert order["total_amount"] == pytest.approx(sum(i["total_price"] for i in detail["items"]))
    assert order["total_amount"] == pytest.approx(49.98)


def test_client_cannot_set_status_or_total(alice, widget, ann):
    order = _order(alice, ann["id"], (widget["id"], 1), status="delivered", total_amount=0.01).json()
    assert order["status"] == "pending"
    assert order["total_amount"] == 10.0


def test_unit_price_is_snapshot(alice, widget, ann):
    order = _order(alice, ann["id"], (widget["id"], 2)).json()
    alice.put(f"/api/products/{widget['id']}", json={"price": 99.0})

    detail = alice.get(f"/api/orders/{order['id']}").json()
    assert detail["total_amount"] == 20.0
    assert detail["items"][0]["unit_price"] == 10.0


def test_missing_product_creates_nothing(alice, widget, ann, db_session):
    resp = _order(alice, ann["id"], (widget["id"], 1), (424242, 1))

    assert resp.status_code == 400
    assert "424242" in resp.json()["detail"]
    assert db_session.query(Order).count() == 0
    assert db_session.query(OrderItem).count() == 0


def test_foreign_product_creates_nothing(alice, bob, make_product, ann, db_session):
    theirs = make_product(client=bob, name="Gadget")

    resp = _order(alice, ann["id"], (theirs["id"], 1))
    assert resp.status_code == 400
    assert str(theirs["id"]) in resp.json()["detail"]
    assert db_session.query(Order).count() == 0
    assert db_session.query(OrderItem).count() == 0


def test_foreign_customer_rejected(alice, bob, widget, make_customer, db_session):
    bea = make_customer(client=bob, name="Bea", email="bea@x.com")

    resp = _order(alice, bea["id"], (widget["id"], 1))
    assert resp.status_code == 400
    assert db_session.query(Order).count() == 0


@pytest.mark.parametrize("body", [
    {"customer_id": 1, "items": []},
    {"customer_id": 1, "items": [{"product_id": 1, "quantity": 0}]},
    {"items": [{"product_id": 1, "quantity": 1}]},
    {"customer_id": 1},
])
def test_order_body_validation(alice, body):
    assert alice.post("/api/orders", json=body).status_code == 400


def test_order_detail_joins_customer_and_product(alice, make_product, ann):
    widget = make_product(sku="W-1")
    order = _order(alice, ann["id"], (widget["id"], 1), notes="leave at door").json()

    detail = alice.get(f"/api/orders/{order['id']}").json()
    assert detail["customer_name"] == "Ann"
    assert detail["customer_email"] == "ann@x.com"
    assert detail["notes"] == "leave at door"
    assert detail["items"][0]["product_name"] == "Widget"
    assert detail["items"][0]["product_sku"] == "W-1"


def test_order_detail_keeps_items_of_deleted_products(alice, widget, ann):
    order = _order(alice, ann["id"], (widget["id"], 1)).json()
    alice.delete(f"/api/products/{widget['id']}")

    detail = alice.get(f"/api/orders/{order['id']}").json()
    assert detail["items"][0]["product_name"] is None
    assert detail["items"][0]["total_price"] == 10.0


def test_order_detail_foreign_or_missing(alice, bob, widget, ann):
    order = _order(alice, ann["id"], (widget["id"], 1)).json()
    assert bob.get(f"/api/orders/{order['id']}").status_code == 404
    assert alice.get("/api/orders/999").status_code == 404


def test_list_orders_scoped_and_filtered(alice, bob, widget, ann, make_product, make_customer):
    first = _order(alice, ann["id"], (widget["id"], 1)).json()
    second = _order(alice, ann["id"], (widget["id"], 2)).json()
    alice.put(f"/api/orders/{first['id']}/status", json={"status": "shipped"})

    gadget = make_product(client=bob, name="Gadget")
    bea = make_customer(client=bob, name="Bea", email="bea@x.com")
    _order(bob, bea["id"], (gadget["id"], 1))

    listed = alice.get("/api/orders").json()
    assert [o["id"] for o in listed] == [second["id"], first["id"]]
    assert listed[0]["customer_name"] == "Ann"
    assert listed[0]["customer_email"] == "ann@x.com"

    pending = alice.get("/api/orders", params={"status": "pending"}).json()
    assert [o["id"] for o in pending] == [second["id"]]

    assert len(bob.get("/api/orders").json()) == 1


def test_status_update(alice, widget, ann):
    order = _order(alice, ann["id"], (widget["id"], 1)).json()

    for status in ("confirmed", "delivered", "pending", "cancelled"):
        resp = alice.put(f"/api/orders/{order['id']}/status", json={"status": status})
        assert resp.status_code == 200
        assert resp.json()["status"] == status


def test_status_update_rejects_unknown_value(alice, widget, ann):
    order = _order(alice, ann["id"], (widget["id"], 1)).json()

    assert alice.put(f"/api/orders/{order['id']}/status", json={"status": "lost"}).status_code == 400
    assert alice.put(f"/api/orders/{order['id']}/status", json={}).status_code == 400
    assert alice.get(f"/api/orders/{order['id']}").json()["status"] == "pending"


def test_status_update_foreign_order(alice, bob, widget, ann):
    order = _order(alice, ann["id"], (widget["id"], 1)).json()

    assert bob.put(f"/api/orders/{order['id']}/status", json={"status": "shipped"}).status_code == 404
    assert alice.get(f"/api/orders/{order['id']}").json()["status"] == "pending"


def test_order_does_not_touch_stock(alice, widget, ann):
    _order(alice, ann["id"], (widget["id"], 50))
    assert alice.get(f"/api/products/{widget['id']}").json()["stock_quantity"] == 5


def test_line_total_is_exact_for_sub_cent_prices(alice, make_product, ann):
    gadget = make_product(name="Gadget", price=0.333)

    order = _order(alice, ann["id"], (gadget["id"], 3)).json()
    item = alice.get(f"/api/orders/{order['id']}").json()["items"][0]

    assert item["unit_price"] == 0.333
    assert item["total_price"] == 0.333 * 3
    assert order["total_amount"] == 0.333 * 3


def test_failed_item_insert_rolls_back_header(alice, widget, ann, db_session, monkeypatch):
    def broken_add_all(self, instances):
        raise SQLAlchemyError("order_items insert failed")

    monkeypatch.setattr(Session, "add_all", broken_add_all)
    resp = _order(alice, ann["id"], (widget["id"], 2))
    monkeypatch.undo()

    assert resp.status_code == 500
    assert resp.json() == {"detail": "Internal server error"}
    db_session.expire_all()
    assert db_session.query(Order).count() == 0
    assert db_session.query(OrderItem).count() == 0
