from __future__ import annotations

import os
from typing import Any, Dict, Optional

from pydantic import BaseModel, field_validator
from pydantic import ValidationError as PydanticValidationError

from .application.operations import Operation
from .application.validators import is_valid_url
from .domain.errors import ConfigurationError

SANDBOX_CERTIFICATE_URL = "https://developer.safaricom.co.ke/api/v1/GenerateSecurityCredential/SandboxCertificate.cer"
PRODUCTION_CERTIFICATE_URL = "https://developer.safaricom.co.ke/api/v1/GenerateSecurityCredential/ProductionCertificate.cer"

DEFAULT_HTTP_TIMEOUT = 60.0

# Operations whose endpoint path may be overridden from the environment.
_PATH_ENV_VARS = {
    Operation.BUSINESS_PAY_BILL: "MPESA_BUSINESS_PAY_BILL_PATH",
    Operation.TRANSACTION_STATUS: "MPESA_TRANSACTION_STATUS_PATH",
    Operation.REMIT_TAX: "MPESA_REMIT_TAX_PATH",
}


class Settings(BaseModel):
    """Typed SDK settings built from environment variables."""

    base_url: str
    app_key: str
    app_secret: str

    initiator_name: Optional[str] = None
    initiator_password: Optional[str] = None

    http_timeout: float = DEFAULT_HTTP_TIMEOUT
    # Upper bound for a whole call; None keeps calls unbounded.
    call_deadline: Optional[float] = None

    sandbox_certificate_url: str = SANDBOX_CERTIFICATE_URL
    production_certificate_url: str = PRODUCTION_CERTIFICATE_URL
    endpoint_overrides: Dict[Operation, str] = {}

    # Middleware settings
    service_name: str = "mpesaoverlay"
    metrics_push_url: Optional[str] = None
    database_url: str = "redis://localhost:6379/0"

    @field_validator("base_url")
    @classmethod
    def validate_base_url(cls, v: str) -> str:
        if not v:
            raise ValueError("missing base url")
        if not is_valid_url(v):
            raise ValueError(f"invalid base url: {v}")
        return v.rstrip("/")

    @field_validator("app_key")
    @classmethod
    def validate_app_key(cls, v: str) -> str:
        if not v:
            raise ValueError("missing app key")
        return v

    @field_validator("app_secret")
    @classmethod
    def validate_app_secret(cls, v: str) -> str:
        if not v:
            raise ValueError("missing app secret")
        return v

    @field_validator("call_deadline")
    @classmethod
    def validate_call_deadline(cls, v: Optional[float]) -> Optional[float]:
        if v is not None and v <= 0:
            raise ValueError("call deadline must be positive")
        return v

    @property
    def is_sandbox(self) -> bool:
        return "sandbox" in self.base_url

    @property
    def certificate_url(self) -> str:
        """Certificate used to encrypt initiator passwords for this environment."""
        if self.is_sandbox:
            return self.sandbox_certificate_url
        return self.production_certificate_url


def build_settings(**values: Any) -> Settings:
    """Build settings, reporting invalid values as ``ConfigurationError``."""
    try:
        return Settings(**values)
    except PydanticValidationError as e:
        raise ConfigurationError(str(e)) from e


def get_settings() -> Settings:
    """Return typed settings instance sourced from env vars."""
    overrides = {
        op: os.environ[var] for op, var in _PATH_ENV_VARS.items() if os.environ.get(var)
    }

    return build_settings(
        base_url=os.environ.get("MPESA_BASE_URL", ""),
        app_key=os.environ.get("MPESA_APP_KEY", ""),
        app_secret=os.environ.get("MPESA_APP_SECRET", ""),
        initiator_name=os.environ.get("MPESA_INITIATOR_NAME"),
        initiator_password=os.environ.get("MPESA_INITIATOR_PASSWORD"),
        http_timeout=os.environ.get("MPESA_HTTP_TIMEOUT") or DEFAULT_HTTP_TIMEOUT,
        call_deadline=os.environ.get("MPESA_CALL_DEADLINE") or None,
        sandbox_certificate_url=os.environ.get(
            "MPESA_SANDBOX_CERTIFICATE_URL", SANDBOX_CERTIFICATE_URL
        ),
        production_certificate_url=os.environ.get(
            "MPESA_PRODUCTION_CERTIFICATE_URL", PRODUCTION_CERTIFICATE_URL
        ),
        endpoint_overrides=overrides,
        service_name=os.environ.get("MPESA_SERVICE_NAME", "mpesaoverlay"),
        metrics_push_url=os.environ.get("MPESA_METRICS_PUSH_URL") or None,
        database_url=os.environ.get("MPESA_DATABASE_URL", "redis://localhost:6379/0"),
    )
