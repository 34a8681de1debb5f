import json

from wallmasters.client.cart import GUEST_CART_KEY, CartStore, cart_key
from wallmasters.client.storage import SessionStorage


def _line(item_id="p-1", size="M", quantity=1):
    return {"id": item_id, "size": size, "quantity": quantity, "price": 100.0}


def test_lines_are_keyed_by_id_and_size():
    cart = CartStore(SessionStorage())

    cart.add(_line())
    cart.add(_line(quantity=2))
    cart.add(_line(size="L"))

    assert [(line["size"], line["quantity"]) for line in cart.items] == [("M", 3), ("L", 1)]


def test_decrement_removes_line_at_one():
    cart = CartStore(SessionStorage())
    cart.add(_line(quantity=2))

    cart.decrement("p-1", "M")
    assert cart.items[0]["quantity"] == 1

    cart.decrement("p-1", "M")
    assert cart.items == []


def test_switching_identity_replaces_cart():
    storage = SessionStorage()
    cart = CartStore(storage)
    cart.add(_line("guest-item"))

    cart.set_user("user-1")
    assert cart.items == []
    cart.add(_line("user-item"))

    cart.set_user(None)
    assert [line["id"] for line in cart.items] == ["guest-item"]

    cart.set_user("user-1")
    assert [line["id"] for line in cart.items] == ["user-item"]


def test_merging_guest_cart_on_login_adds_quantities_and_empties_guest():
    storage = SessionStorage()
    storage.set(cart_key("user-1"), [_line(quantity=2)])
    cart = CartStore(storage)
    cart.add(_line(quantity=1))
    cart.add(_line("p-2"))

    cart.set_user("user-1", merge_guest=True)

    assert {line["id"]: line["quantity"] for line in cart.items} == {"p-1": 3, "p-2": 1}
    assert storage.get(GUEST_CART_KEY) == []
    assert storage.get(cart_key("user-1")) == cart.items


def test_session_and_carts_persist_to_file(tmp_path):
    path = tmp_path / "session.json"
    storage = SessionStorage(path)
    storage.save_session("access", "refresh", {"_id": "user-1", "name": "Jo", "email": "jo@example.com"})
    CartStore(storage, "user-1").add(_line())

    reloaded = SessionStorage(path)
    assert reloaded.access_token == "access"
    assert CartStore(reloaded, reloaded.user_id).items == [_line()]

    reloaded.clear_session()
    on_disk = json.loads(path.read_text())
    assert "authToken" not in on_disk
    assert "refreshToken" not in on_disk
    assert "userId" not in on_disk
    assert on_disk[cart_key("user-1")] == [_line()]


def test_unreadable_session_file_means_no_session(tmp_path):
    path = tmp_path / "session.json"
    path.write_text("{not json")

    storage = SessionStorage(path)

    assert storage.access_token is None
    assert storage.refresh_token is None
