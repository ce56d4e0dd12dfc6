"""Access token acquisition against the gateway's OAuth endpoint."""

from __future__ import annotations

import httpx

from ..application.operations import AUTH_PATH
from ..application.response_dtos import TokenResponseDTO
from ..domain.errors import AuthError
from .http.http_client import AsyncHttpClient


class TokenProvider:
    """Fetch a bearer token with HTTP Basic credentials.

    Every call performs a fresh round trip; tokens are neither cached nor
    tracked for expiry.
    """

    def __init__(
        self,
        http: AsyncHttpClient,
        app_key: str,
        app_secret: str,
        *,
        path: str = AUTH_PATH,
    ) -> None:
        self._http = http
        self._auth = httpx.BasicAuth(app_key, app_secret)
        self._path = path

    async def get_token(self) -> TokenResponseDTO:
        try:
            resp = await self._http.get(
                self._path,
                auth=self._auth,
                headers={
                    "Content-Type": "application/json",
                    "Cache-Control": "no-cache",
                },
            )
        except httpx.HTTPError as e:
            raise AuthError(f"failed to get token: {e}") from e

        if resp.status_code != httpx.codes.OK:
            raise AuthError(f"failed to get token: status {resp.status_code}")

        try:
            return TokenResponseDTO.model_validate(resp.json())
        except ValueError as e:
            raise AuthError(f"failed to get token: {e}") from e
