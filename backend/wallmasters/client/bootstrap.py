"""Restore a session before the storefront becomes interactive."""
import logging

from wallmasters.client.api import SessionExpiredError, SessionState, WallMastersClient

logger = logging.getLogger(__name__)


async def bootstrap_session(client: WallMastersClient) -> SessionState:
    """Upgrade an expired-access/valid-refresh state into a live session.

    With no access token but a refresh token on hand, one refresh is attempted.
    If it fails the session storage is cleared and the caller continues as a
    guest; that is an expected outcome, so nothing is raised and the logout
    hook is not called.
    """
    storage = client.storage

    if not storage.access_token and storage.refresh_token:
        logger.info("No access token but a refresh token exists, attempting refresh")
        try:
            await client.refresh_access_token(notify_logout=False)
        except SessionExpiredError as e:
            logger.info(f"Session refresh at startup failed, continuing as guest: {e}")
    elif not storage.access_token:
        logger.info("No tokens found, continuing as a guest user")

    client.cart.set_user(storage.user_id)
    return client.state
