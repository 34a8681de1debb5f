"""
Async client for the Wall Masters API.

Handles the session on behalf of the storefront:
- Bearer access token on every authenticated call
- One refresh per client when calls start failing with 401, shared by
  every call that is waiting on it
- Exactly one replay of the failed call after a refresh
- Clearing the local session when the refresh token is rejected
"""

import asyncio
import inspect
import logging
from enum import Enum
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

import httpx

from wallmasters.client.cart import CartStore
from wallmasters.client.single_flight import SingleFlight
from wallmasters.client.storage import SessionStorage

logger = logging.getLogger(__name__)

DEFAULT_REFRESH_TIMEOUT = 10.0


class SessionState(str, Enum):
    NO_SESSION = "no_session"
    ACCESS_VALID = "access_valid"
    ACCESS_EXPIRED = "access_expired"
    REFRESHING = "refreshing"
    REFRESH_INVALID = "refresh_invalid"


class ApiError(Exception):
    """Non-2xx answer from the API."""

    def __init__(self, status_code: Optional[int], message: str):
        self.status_code = status_code
        self.message = message
        super().__init__(f"{status_code}: {message}" if status_code else message)


class AuthenticationError(ApiError):
    """Still 401 after a successful refresh; not retried again."""


class SessionExpiredError(ApiError):
    """The refresh token was refused or the refresh could not complete."""


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text or response.reason_phrase
    if isinstance(body, dict) and body.get("message"):
        return str(body["message"])
    return response.reason_phrase


class WallMastersClient:
    """
    Async HTTP client for the storefront API.

    ``on_logout`` is called once whenever a refresh failure ends the session,
    which is where a UI would send the user back to the login screen.
    """

    def __init__(
        self,
        base_url: str,
        storage: Optional[SessionStorage] = None,
        storage_path: Optional[Path] = None,
        timeout: float = 30.0,
        refresh_timeout: float = DEFAULT_REFRESH_TIMEOUT,
        on_logout: Optional[Callable[[], Any]] = None,
        merge_guest_cart: bool = False,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.storage = storage or SessionStorage(storage_path)
        self.timeout = timeout
        self.refresh_timeout = refresh_timeout
        self.on_logout = on_logout
        self.merge_guest_cart = merge_guest_cart
        self.cart = CartStore(self.storage, self.storage.user_id)
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None
        self._refresh_flight = SingleFlight()
        self._state = self._initial_state()

    def _initial_state(self) -> SessionState:
        if self.storage.access_token:
            return SessionState.ACCESS_VALID
        if self.storage.refresh_token:
            return SessionState.ACCESS_EXPIRED
        return SessionState.NO_SESSION

    @property
    def state(self) -> SessionState:
        return self._state

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=httpx.Timeout(self.timeout),
                headers={"Content-Type": "application/json"},
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> "WallMastersClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    # ------------------------------------------------------------------
    # Session lifecycle
    # ------------------------------------------------------------------

    def _start_session(self, data: Dict[str, Any]) -> None:
        user = data["user"]
        self.storage.save_session(data["token"], data["refreshToken"], user)
        self._state = SessionState.ACCESS_VALID
        if self.cart.user_id != user["_id"]:
            self.cart.set_user(user["_id"], merge_guest=self.merge_guest_cart)

    async def _end_session(self, notify: bool) -> None:
        self.storage.clear_session()
        self.cart.set_user(None)
        self._state = SessionState.NO_SESSION
        if notify and self.on_logout is not None:
            result = self.on_logout()
            if inspect.isawaitable(result):
                await result

    async def _post_public(self, path: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        client = await self._get_client()
        response = await client.post(path, json=payload)
        if response.is_error:
            raise ApiError(response.status_code, _error_message(response))
        return response.json()

    async def login(self, email: str, password: str) -> Dict[str, Any]:
        data = await self._post_public("/login", {"email": email, "password": password})
        self._start_session(data)
        return data["user"]

    async def register(self, name: str, email: str, password: str) -> Dict[str, Any]:
        data = await self._post_public(
            "/register", {"name": name, "email": email, "password": password}
        )
        self._start_session(data)
        return data["user"]

    async def logout(self) -> None:
        """Revoke the server-side session and clear local state."""
        if self.storage.access_token:
            try:
                await self.request("POST", "/logout")
            except ApiError as e:
                logger.info(f"Server logout failed, clearing local session anyway: {e}")
        await self._end_session(notify=False)

    async def refresh_access_token(self, notify_logout: bool = True) -> str:
        """Exchange the stored refresh token; concurrent callers share one request."""
        key = self.storage.refresh_token
        if not key:
            self._state = SessionState.REFRESH_INVALID
            await self._end_session(notify=notify_logout)
            raise SessionExpiredError(None, "No refresh token found")
        return await self._refresh_flight.do(key, lambda: self._perform_refresh(key, notify_logout))

    async def _perform_refresh(self, refresh_token: str, notify_logout: bool) -> str:
        self._state = SessionState.REFRESHING
        client = await self._get_client()
        try:
            response = await asyncio.wait_for(
                client.post("/refresh-token", json={"refreshToken": refresh_token}),
                timeout=self.refresh_timeout,
            )
        except (asyncio.TimeoutError, httpx.HTTPError) as e:
            logger.warning(f"Token refresh did not complete: {e!r}")
            self._state = SessionState.REFRESH_INVALID
            await self._end_session(notify=notify_logout)
            raise SessionExpiredError(None, "Token refresh failed") from e

        if response.status_code != 200:
            message = _error_message(response)
            logger.info(f"Refresh token rejected ({response.status_code}): {message}")
            self._state = SessionState.REFRESH_INVALID
            await self._end_session(notify=notify_logout)
            raise SessionExpiredError(response.status_code, message)

        try:
            self._start_session(response.json())
        except (ValueError, KeyError, TypeError) as e:
            logger.warning(f"Malformed refresh response: {e!r}")
            self._state = SessionState.REFRESH_INVALID
            await self._end_session(notify=notify_logout)
            raise SessionExpiredError(None, "Malformed refresh response") from e
        logger.debug("Access token refreshed")
        return self.storage.access_token

    # ------------------------------------------------------------------
    # Requests
    # ------------------------------------------------------------------

    async def _send(
        self,
        method: str,
        path: str,
        token: Optional[str],
        json: Optional[Dict] = None,
    ) -> httpx.Response:
        client = await self._get_client()
        headers = {"Authorization": f"Bearer {token}"} if token else None
        return await client.request(method, path, json=json, headers=headers)

    async def request(self, method: str, path: str, json: Optional[Dict] = None) -> httpx.Response:
        """Authenticated request with one refresh-and-replay on 401.

        Raises:
            SessionExpiredError: the refresh failed and the session was cleared
            AuthenticationError: the replay was refused as well
            ApiError: any other error status
        """
        token = self.storage.access_token
        refresh_key = self.storage.refresh_token
        response = await self._send(method, path, token, json)
        if response.status_code != 401:
            return self._check(response)

        if self.storage.refresh_token != refresh_key:
            # Another call already rotated or ended the session meanwhile.
            if not self.storage.access_token:
                raise SessionExpiredError(None, "Session ended")
            new_token = self.storage.access_token
        else:
            self._state = SessionState.ACCESS_EXPIRED
            new_token = await self.refresh_access_token()

        response = await self._send(method, path, new_token, json)
        if response.status_code == 401:
            raise AuthenticationError(401, _error_message(response))
        return self._check(response)

    @staticmethod
    def _check(response: httpx.Response) -> httpx.Response:
        if response.is_error:
            raise ApiError(response.status_code, _error_message(response))
        return response

    # ------------------------------------------------------------------
    # Endpoints
    # ------------------------------------------------------------------

    async def get_user_details(self) -> Dict[str, Any]:
        return (await self.request("GET", "/user/details")).json()

    async def change_password(self, old_password: str, new_password: str) -> None:
        await self.request(
            "POST", "/change-password", {"oldPassword": old_password, "newPassword": new_password}
        )

    async def request_password_reset(self, email: str) -> None:
        await self._post_public("/request-password-reset", {"email": email})

    async def reset_password(self, token: str, password: str) -> None:
        await self._post_public("/reset-password", {"token": token, "password": password})

    async def list_addresses(self) -> List[Dict[str, Any]]:
        return (await self.request("GET", "/addresses")).json()

    async def add_address(self, address: Dict[str, Any]) -> List[Dict[str, Any]]:
        response = await self.request("POST", "/addresses", {"address": address})
        return response.json()["savedAddresses"]

    async def delete_address(self, address_id: str) -> List[Dict[str, Any]]:
        response = await self.request("DELETE", f"/addresses/{address_id}")
        return response.json()["savedAddresses"]

    async def set_default_address(self, address_id: str) -> List[Dict[str, Any]]:
        response = await self.request("PUT", f"/addresses/{address_id}/default")
        return response.json()["savedAddresses"]

    async def place_order(self, order: Dict[str, Any]) -> Dict[str, Any]:
        """Signed-in users order through the refresh path; guests post anonymously."""
        if self.storage.access_token or self.storage.refresh_token:
            response = await self.request("POST", "/orders", order)
            data = response.json()
        else:
            data = await self._post_public("/orders", order)
        self.cart.clean()
        return data["order"]

    async def list_orders(self) -> List[Dict[str, Any]]:
        return (await self.request("GET", "/orders")).json()

    async def save_for_later(self, product: Dict[str, Any]) -> None:
        await self.request("POST", "/saved-items", {"product": product})

    async def list_saved_items(self) -> List[Dict[str, Any]]:
        return (await self.request("GET", "/saved-items")).json()

    async def remove_saved_item(self, product_id: str) -> None:
        await self.request("DELETE", f"/saved-items/{product_id}")

    async def send_contact_email(self, name: str, email: str, comment: str) -> None:
        await self._post_public("/send-email", {"name": name, "email": email, "comment": comment})
