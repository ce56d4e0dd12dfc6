"""Domain-specific exceptions.

Every error raised by the SDK carries an ``ErrorKind`` so callers can branch
on ``err.kind`` instead of comparing exception instances.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional


class ErrorKind(str, Enum):
    """Closed set of failure kinds surfaced by the SDK."""

    # Validation failures, raised before any network access
    INVALID_COMMAND_ID = "invalid command id"
    INVALID_TRANSACTION_TYPE = "invalid transaction type"
    INVALID_RESPONSE_TYPE = "invalid response type"
    INVALID_PHONE_NUMBER = "invalid phone number"
    INVALID_SHORT_CODE = "invalid short code"
    INVALID_ACCOUNT_REFERENCE = "invalid account reference"
    INVALID_TRANSACTION_DESC = "invalid transaction description"
    INVALID_REMARKS = "invalid remarks"
    INVALID_OCCASION = "invalid occasion"
    INVALID_IDENTIFIER_TYPE = "invalid identifier type"
    INVALID_URL = "invalid url"

    CONFIGURATION = "invalid configuration"
    AUTH = "failed to get token"
    CRYPTO = "failed to generate security credential"
    TRANSPORT = "failed to send request"
    DECODE = "failed to decode response"
    GATEWAY = "gateway error"


VALIDATION_KINDS = frozenset(
    {
        ErrorKind.INVALID_COMMAND_ID,
        ErrorKind.INVALID_TRANSACTION_TYPE,
        ErrorKind.INVALID_RESPONSE_TYPE,
        ErrorKind.INVALID_PHONE_NUMBER,
        ErrorKind.INVALID_SHORT_CODE,
        ErrorKind.INVALID_ACCOUNT_REFERENCE,
        ErrorKind.INVALID_TRANSACTION_DESC,
        ErrorKind.INVALID_REMARKS,
        ErrorKind.INVALID_OCCASION,
        ErrorKind.INVALID_IDENTIFIER_TYPE,
        ErrorKind.INVALID_URL,
    }
)


class MpesaError(Exception):
    """Base class for every error raised by the SDK."""

    default_kind: ErrorKind = ErrorKind.TRANSPORT

    def __init__(
        self, message: Optional[str] = None, *, kind: Optional[ErrorKind] = None
    ) -> None:
        self.kind = kind or self.default_kind
        self.message = message or self.kind.value
        super().__init__(self.message)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, MpesaError):
            return NotImplemented
        return (
            type(self) is type(other)
            and self.kind == other.kind
            and self.message == other.message
        )

    def __hash__(self) -> int:
        return hash((type(self), self.kind, self.message))

    def __repr__(self) -> str:
        return f"{type(self).__name__}(kind={self.kind.name}, message={self.message!r})"


class ValidationError(MpesaError):
    """Raised when a request violates an operation's business rules."""

    def __init__(self, kind: ErrorKind) -> None:
        if kind not in VALIDATION_KINDS:
            raise ValueError(f"{kind!r} is not a validation error kind")
        super().__init__(kind.value, kind=kind)


class ConfigurationError(MpesaError):
    """Raised when SDK settings are missing or malformed."""

    default_kind = ErrorKind.CONFIGURATION


class AuthError(MpesaError):
    """Raised when the access token could not be obtained."""

    default_kind = ErrorKind.AUTH


class CryptoError(MpesaError):
    """Raised when the security credential could not be generated."""

    default_kind = ErrorKind.CRYPTO


class TransportError(MpesaError):
    """Raised when the HTTP exchange with the gateway failed."""

    default_kind = ErrorKind.TRANSPORT


class DecodeError(MpesaError):
    """Raised when a gateway response body is not the expected JSON."""

    default_kind = ErrorKind.DECODE


class GatewayError(MpesaError):
    """Raised when the gateway answered with its structured error envelope."""

    default_kind = ErrorKind.GATEWAY

    def __init__(
        self,
        code: str,
        message: str,
        request_id: Optional[str] = None,
        status_code: Optional[int] = None,
    ) -> None:
        self.code = code
        self.request_id = request_id
        self.status_code = status_code
        self.gateway_message = message
        super().__init__(f"{code}: {message}")
