"""A fake Daraja gateway served through ``httpx.MockTransport``."""

from __future__ import annotations

import json
from collections import Counter
from typing import Any, Awaitable, Callable, Dict, List, Union

import httpx

Handler = Callable[[httpx.Request], Union[httpx.Response, Awaitable[httpx.Response]]]

SANDBOX_BASE_URL = "https://sandbox.safaricom.co.ke"
PRODUCTION_BASE_URL = "https://api.safaricom.co.ke"
TOKEN_PATH = "oauth/v1/generate"
SANDBOX_CERTIFICATE_PATH = "api/v1/GenerateSecurityCredential/SandboxCertificate.cer"
PRODUCTION_CERTIFICATE_PATH = "api/v1/GenerateSecurityCredential/ProductionCertificate.cer"
TEST_ACCESS_TOKEN = "c9SQxWWhmdVRlyh0zh8gZDTkubVF"

VALID_ACK = {
    "OriginatorConversationID": "5118-111210482-1",
    "ConversationID": "AG_20230420_2010759fd5662ef6d054",
    "ResponseCode": "0",
    "ResponseDescription": "Accept the service request successfully.",
}


def json_reply(status_code: int, body: Any) -> Handler:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(status_code, json=body)

    return handler


def raw_reply(status_code: int, content: bytes) -> Handler:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(status_code, content=content)

    return handler


class FakeGateway:
    """Route requests by URL path and count every call.

    Unrouted paths answer like the real gateway would on success: a token
    for the OAuth endpoint, the certificate for ``.cer`` downloads, and the
    shared acknowledgement envelope for anything else.
    """

    def __init__(self, certificate: bytes) -> None:
        self.certificate = certificate
        self.access_token = TEST_ACCESS_TOKEN
        self.calls: Counter[str] = Counter()
        self.requests: List[httpx.Request] = []
        self.routes: Dict[str, Handler] = {}

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handle)

    @property
    def total_calls(self) -> int:
        return sum(self.calls.values())

    def route(self, path: str, handler: Handler) -> None:
        self.routes[path] = handler

    def requests_to(self, path: str) -> List[httpx.Request]:
        return [r for r in self.requests if r.url.path.lstrip("/") == path]

    def body_of(self, path: str) -> Dict[str, Any]:
        """Return the JSON body of the last request sent to ``path``."""
        return json.loads(self.requests_to(path)[-1].content)

    def handle(self, request: httpx.Request):
        path = request.url.path.lstrip("/")
        self.calls[path] += 1
        self.requests.append(request)

        if path in self.routes:
            return self.routes[path](request)
        if path == TOKEN_PATH:
            return httpx.Response(
                200, json={"access_token": self.access_token, "expires_in": "3599"}
            )
        if path.endswith(".cer"):
            return httpx.Response(200, content=self.certificate)
        return httpx.Response(200, json=VALID_ACK)
