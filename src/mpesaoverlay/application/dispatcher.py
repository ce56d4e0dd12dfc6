"""Dispatcher: the SDK implementation that talks to the gateway."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Dict, Optional, Type, TypeVar
from types import TracebackType
from uuid import uuid4

import httpx

from ..crypto.security_credential import CredentialEncryptor
from ..crypto.stk_password import generate_timestamp_and_password
from ..domain.errors import DecodeError, GatewayError, TransportError
from ..env import Settings
from ..infrastructure.http.http_client import AsyncHttpClient
from ..infrastructure.token_provider import TokenProvider
from .operations import OPERATIONS, Operation, OperationSpec, resolve_paths
from .request_dtos import (
    AccountBalanceRequestDTO,
    B2CPaymentRequestDTO,
    BusinessPayBillRequestDTO,
    C2BRegisterURLRequestDTO,
    C2BSimulateRequestDTO,
    ExpressQueryRequestDTO,
    ExpressSimulateRequestDTO,
    GenerateQRRequestDTO,
    MpesaRequestDTO,
    RemitTaxRequestDTO,
    ReverseRequestDTO,
    TransactionStatusRequestDTO,
)
from .response_dtos import (
    AccountBalanceResponseDTO,
    B2CPaymentResponseDTO,
    BusinessPayBillResponseDTO,
    C2BRegisterURLResponseDTO,
    C2BSimulateResponseDTO,
    ErrorResponseDTO,
    ExpressQueryResponseDTO,
    ExpressSimulateResponseDTO,
    GenerateQRResponseDTO,
    MpesaResponseDTO,
    RemitTaxResponseDTO,
    ReverseResponseDTO,
    TokenResponseDTO,
    TransactionStatusResponseDTO,
)
from .validators import validate

logger = logging.getLogger(__name__)

ResponseT = TypeVar("ResponseT", bound=MpesaResponseDTO)


class Dispatcher:
    """Validate, authorize and send requests to the gateway.

    Each call runs: validate -> security credential (when required) ->
    marshal -> fresh access token -> HTTP exchange -> decode envelope. Any
    failure aborts the call; nothing is retried or cached.
    """

    def __init__(
        self,
        settings: Settings,
        *,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._settings = settings
        self._http = AsyncHttpClient(
            settings.base_url, timeout=settings.http_timeout, transport=transport
        )
        self._paths = resolve_paths(settings.endpoint_overrides)
        self._token_provider = TokenProvider(
            self._http,
            settings.app_key,
            settings.app_secret,
            path=self._paths[Operation.GET_TOKEN],
        )
        self._encryptor = CredentialEncryptor(self._http, settings.certificate_url)

    @property
    def certificate_url(self) -> str:
        return self._encryptor.certificate_url

    # Operations

    async def get_token(self) -> TokenResponseDTO:
        return await self._bounded(Operation.GET_TOKEN, self._token_provider.get_token())

    async def express_simulate(
        self, req: ExpressSimulateRequestDTO
    ) -> ExpressSimulateResponseDTO:
        return await self._execute(Operation.EXPRESS_SIMULATE, req)

    async def express_query(self, req: ExpressQueryRequestDTO) -> ExpressQueryResponseDTO:
        return await self._execute(Operation.EXPRESS_QUERY, req)

    async def b2c_payment(self, req: B2CPaymentRequestDTO) -> B2CPaymentResponseDTO:
        return await self._execute(Operation.B2C_PAYMENT, req)

    async def business_pay_bill(
        self, req: BusinessPayBillRequestDTO
    ) -> BusinessPayBillResponseDTO:
        return await self._execute(Operation.BUSINESS_PAY_BILL, req)

    async def account_balance(
        self, req: AccountBalanceRequestDTO
    ) -> AccountBalanceResponseDTO:
        return await self._execute(Operation.ACCOUNT_BALANCE, req)

    async def c2b_register_url(
        self, req: C2BRegisterURLRequestDTO
    ) -> C2BRegisterURLResponseDTO:
        return await self._execute(Operation.C2B_REGISTER_URL, req)

    async def c2b_simulate(self, req: C2BSimulateRequestDTO) -> C2BSimulateResponseDTO:
        return await self._execute(Operation.C2B_SIMULATE, req)

    async def generate_qr(self, req: GenerateQRRequestDTO) -> GenerateQRResponseDTO:
        return await self._execute(Operation.GENERATE_QR, req)

    async def reverse(self, req: ReverseRequestDTO) -> ReverseResponseDTO:
        return await self._execute(Operation.REVERSE, req)

    async def transaction_status(
        self, req: TransactionStatusRequestDTO
    ) -> TransactionStatusResponseDTO:
        return await self._execute(Operation.TRANSACTION_STATUS, req)

    async def remit_tax(self, req: RemitTaxRequestDTO) -> RemitTaxResponseDTO:
        return await self._execute(Operation.REMIT_TAX, req)

    # Dispatch pipeline

    async def _execute(self, operation: Operation, req: MpesaRequestDTO) -> Any:
        return await self._bounded(operation, self._dispatch(OPERATIONS[operation], req))

    async def _bounded(self, operation: Operation, coro: Any) -> Any:
        deadline = self._settings.call_deadline
        if deadline is None:
            return await coro
        try:
            return await asyncio.wait_for(coro, deadline)
        except asyncio.TimeoutError as e:
            raise TransportError(
                f"{operation.value} did not complete within {deadline}s"
            ) from e

    async def _dispatch(self, spec: OperationSpec, req: MpesaRequestDTO) -> Any:
        if spec.request_type is None or not isinstance(req, spec.request_type):
            raise TypeError(
                f"{spec.operation.value} expects {spec.request_type}, got {type(req).__name__}"
            )

        validate(req)
        prepared = await self._prepare(spec, req)
        payload = prepared.to_payload()

        token = await self._token_provider.get_token()
        headers = {
            "Content-Type": "application/json",
            "Cache-Control": "no-cache",
        }
        if token.access_token:
            headers["Authorization"] = f"Bearer {token.access_token}"

        path = self._paths[spec.operation]
        try:
            resp = await self._http.request(
                spec.method, path, json=payload, headers=headers
            )
        except httpx.HTTPError as e:
            raise TransportError(f"failed to send request: {e}") from e

        logger.debug("%s %s -> %s", spec.method, path, resp.status_code)
        return decode_response(spec.response_type, resp)

    async def _prepare(
        self, spec: OperationSpec, req: MpesaRequestDTO
    ) -> MpesaRequestDTO:
        """Return a copy of ``req`` with the derived fields filled in.

        The caller's request object is never mutated.
        """
        updates: Dict[str, Any] = {}

        if isinstance(req, (ExpressSimulateRequestDTO, ExpressQueryRequestDTO)):
            timestamp, password = generate_timestamp_and_password(
                req.business_short_code, req.pass_key
            )
            updates["timestamp"] = timestamp
            updates["password"] = password

        if isinstance(req, B2CPaymentRequestDTO) and not req.originator_conversation_id:
            updates["originator_conversation_id"] = str(uuid4())

        if spec.requires_security_credential:
            initiator_password = (
                getattr(req, "initiator_password", None)
                or self._settings.initiator_password
                or ""
            )
            updates["initiator_name"] = (
                getattr(req, "initiator_name", None) or self._settings.initiator_name
            )
            updates["security_credential"] = await self._encryptor.encrypt(
                initiator_password
            )

        return req.model_copy(update=updates) if updates else req

    # Lifecycle

    async def aclose(self) -> None:
        await self._http.aclose()

    async def __aenter__(self) -> "Dispatcher":
        return self

    async def __aexit__(
        self,
        exc_type: Optional[Type[BaseException]],
        exc_val: Optional[BaseException],
        exc_tb: Optional[TracebackType],
    ) -> None:
        await self.aclose()


def decode_response(response_type: Type[ResponseT], resp: httpx.Response) -> ResponseT:
    """Decode a gateway response into ``response_type``.

    Raises:
        GatewayError: The gateway answered with its error envelope.
        DecodeError: The body is not the JSON the envelope expects.
    """
    try:
        body = resp.json()
    except ValueError as e:
        raise DecodeError(f"failed to decode response body: {e}") from e

    if resp.status_code != httpx.codes.OK:
        raise _gateway_error(body, resp)

    # Some endpoints report failures in a 200 response.
    if isinstance(body, dict) and body.get("errorCode") and "ResponseCode" not in body:
        raise _gateway_error(body, resp)

    try:
        return response_type.model_validate(body)
    except ValueError as e:
        raise DecodeError(f"failed to decode response body: {e}") from e


def _gateway_error(body: Any, resp: httpx.Response) -> Exception:
    try:
        err = ErrorResponseDTO.model_validate(body)
    except ValueError as e:
        return DecodeError(f"failed to decode error response: {e}")
    if not err.code and not err.message:
        return GatewayError(
            str(resp.status_code), resp.reason_phrase, status_code=resp.status_code
        )
    return GatewayError(
        err.code, err.message, request_id=err.request_id, status_code=resp.status_code
    )
