"""HTTP client for the auth endpoints, used by the app shell."""

import logging
from typing import Callable, Optional

import httpx

from backend.config import settings
from backend.state.session import AppSession

logger = logging.getLogger(__name__)

Navigate = Callable[[str], None]


class AuthClient:
    """Talks to /api/auth and keeps the local session in step."""

    def __init__(
        self,
        session: AppSession,
        server_url: Optional[str] = None,
        http: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self.session = session
        self.server_url = (server_url or settings.SERVER_URL).rstrip("/")
        self._http = http or httpx.AsyncClient(timeout=10.0)

    async def aclose(self) -> None:
        await self._http.aclose()

    async def logout(self, navigate: Navigate) -> None:
        """
        Log out optimistically.

        The server call only clears the auth cookie. Any failure there is
        logged and swallowed; the local session is reset and the user is sent
        to the landing page either way.
        """
        try:
            response = await self._http.get(f"{self.server_url}/auth/logout")
            response.raise_for_status()
        except Exception as e:
            logger.error(f"Logout error: {e}")
        finally:
            self.session.reset()
            navigate("/")
