import httpx
import pytest
from conftest import register_user

from wallmasters.client.api import SessionState, WallMastersClient
from wallmasters.client.bootstrap import bootstrap_session
from wallmasters.client.cart import cart_key
from wallmasters.client.storage import SessionStorage

USER = {"_id": "user-1", "name": "Jo", "email": "jo@example.com"}


def _mock_client(storage, handler, **kwargs):
    return WallMastersClient(
        "http://testserver",
        storage=storage,
        transport=httpx.MockTransport(handler),
        **kwargs,
    )


@pytest.mark.asyncio
async def test_refresh_only_state_is_upgraded_before_use():
    calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request.url.path)
        return httpx.Response(
            200,
            json={"success": True, "token": "access-1", "refreshToken": "refresh-1", "user": USER},
        )

    storage = SessionStorage()
    storage.set("refreshToken", "refresh-0")
    storage.set(cart_key("user-1"), [{"id": "p-1", "size": "M", "quantity": 1}])
    client = _mock_client(storage, handler)
    assert client.state == SessionState.ACCESS_EXPIRED

    state = await bootstrap_session(client)

    assert state == SessionState.ACCESS_VALID
    assert calls == ["/refresh-token"]
    assert storage.access_token == "access-1"
    assert storage.get("userName") == "Jo"
    assert client.cart.user_id == "user-1"
    assert client.cart.items == [{"id": "p-1", "size": "M", "quantity": 1}]
    await client.close()


@pytest.mark.asyncio
async def test_failed_startup_refresh_continues_as_guest_quietly():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(403, json={"message": "Invalid or expired refresh token"})

    logouts = []
    storage = SessionStorage()
    storage.save_session("", "refresh-0", USER)
    storage.set("guestCart", [{"id": "p-9", "size": None, "quantity": 3}])
    client = _mock_client(storage, handler, on_logout=lambda: logouts.append(True))

    state = await bootstrap_session(client)

    assert state == SessionState.NO_SESSION
    assert logouts == []
    assert storage.refresh_token is None
    assert storage.user_id is None
    assert client.cart.user_id is None
    assert client.cart.items == [{"id": "p-9", "size": None, "quantity": 3}]
    await client.close()


@pytest.mark.asyncio
async def test_no_tokens_means_guest_without_network():
    def handler(request: httpx.Request) -> httpx.Response:
        raise AssertionError("bootstrap should not call the API")

    client = _mock_client(SessionStorage(), handler)

    assert await bootstrap_session(client) == SessionState.NO_SESSION
    await client.close()


@pytest.mark.asyncio
async def test_valid_access_token_is_left_alone():
    def handler(request: httpx.Request) -> httpx.Response:
        raise AssertionError("bootstrap should not call the API")

    storage = SessionStorage()
    storage.save_session("access-0", "refresh-0", USER)
    client = _mock_client(storage, handler)

    assert await bootstrap_session(client) == SessionState.ACCESS_VALID
    assert storage.access_token == "access-0"
    await client.close()


@pytest.mark.asyncio
async def test_client_against_api_end_to_end(app, client):
    register_user(client)
    api = WallMastersClient("http://testserver", transport=httpx.ASGITransport(app=app), merge_guest_cart=True)
    api.cart.add({"id": "p-1", "size": "M", "quantity": 1})

    user = await api.login("jo@example.com", "TestPass123!")
    first_access = api.storage.access_token
    original_refresh = api.storage.refresh_token

    assert api.cart.user_id == user["_id"]
    assert api.cart.items == [{"id": "p-1", "size": "M", "quantity": 1}]

    # Simulate the access token lapsing while idle.
    api.storage.set("authToken", "expired")
    details = await api.get_user_details()

    assert details["email"] == "jo@example.com"
    assert api.storage.access_token not in (first_access, "expired")
    assert api.storage.refresh_token != original_refresh

    await api.logout()
    assert api.state == SessionState.NO_SESSION
    assert api.storage.refresh_token is None
    await api.close()
