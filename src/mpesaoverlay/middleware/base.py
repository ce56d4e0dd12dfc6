"""Shared forwarding machinery for SDK middlewares.

A middleware wraps another ``MpesaSDK`` and implements the same interface.
Every operation is funnelled through ``_observe``, which subclasses override
to record an observation around the inner call. Middlewares never change the
request, the returned envelope or the raised error.
"""

from __future__ import annotations

from functools import partial
from typing import Any, Awaitable, Callable, Dict, Mapping, Optional, Tuple, Type
from types import MappingProxyType, TracebackType

from ..application.operations import Operation
from ..application.request_dtos import (
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
from ..application.response_dtos import (
    AccountBalanceResponseDTO,
    B2CPaymentResponseDTO,
    BusinessPayBillResponseDTO,
    C2BRegisterURLResponseDTO,
    C2BSimulateResponseDTO,
    ExpressQueryResponseDTO,
    ExpressSimulateResponseDTO,
    GenerateQRResponseDTO,
    RemitTaxResponseDTO,
    ReverseResponseDTO,
    TokenResponseDTO,
    TransactionStatusResponseDTO,
)
from ..domain.shared import MpesaSDK

Call = Callable[[], Awaitable[Any]]

# Request attributes worth attaching to log records and spans.
OBSERVED_FIELDS: Mapping[Operation, Tuple[str, ...]] = MappingProxyType(
    {
        Operation.GET_TOKEN: (),
        Operation.EXPRESS_QUERY: ("business_short_code", "checkout_request_id"),
        Operation.EXPRESS_SIMULATE: (
            "business_short_code",
            "transaction_type",
            "amount",
            "party_a",
            "party_b",
            "phone_number",
            "account_reference",
        ),
        Operation.B2C_PAYMENT: (
            "initiator_name",
            "originator_conversation_id",
            "command_id",
            "amount",
            "party_a",
            "party_b",
        ),
        Operation.BUSINESS_PAY_BILL: (
            "command_id",
            "initiator_name",
            "sender_identifier_type",
            "receiver_identifier_type",
            "amount",
            "party_a",
            "party_b",
            "account_reference",
            "requester",
        ),
        Operation.ACCOUNT_BALANCE: (
            "command_id",
            "party_a",
            "identifier_type",
            "initiator_name",
        ),
        Operation.C2B_REGISTER_URL: ("response_type", "short_code"),
        Operation.C2B_SIMULATE: (
            "command_id",
            "amount",
            "msisdn",
            "bill_ref_number",
            "short_code",
        ),
        Operation.GENERATE_QR: (
            "merchant_name",
            "ref_no",
            "amount",
            "trx_code",
            "cpi",
            "size",
        ),
        Operation.REVERSE: (
            "command_id",
            "initiator_name",
            "transaction_id",
            "amount",
            "receiver_party",
            "receiver_identifier_type",
        ),
        Operation.TRANSACTION_STATUS: (
            "command_id",
            "initiator_name",
            "transaction_id",
            "party_a",
            "identifier_type",
        ),
        Operation.REMIT_TAX: (
            "command_id",
            "initiator_name",
            "sender_identifier_type",
            "receiver_identifier_type",
            "amount",
            "party_a",
            "party_b",
            "account_reference",
        ),
    }
)


def observed_attributes(
    operation: Operation, req: Optional[MpesaRequestDTO]
) -> Dict[str, Any]:
    """Return the non-empty observed attributes of ``req``, keyed by wire name."""
    if req is None:
        return {}
    attrs: Dict[str, Any] = {}
    for name in OBSERVED_FIELDS[operation]:
        value = getattr(req, name, None)
        if value is None:
            continue
        field = type(req).model_fields[name]
        attrs[field.alias or name] = value
    return attrs


class SDKMiddleware:
    """Base class forwarding every operation to the wrapped SDK."""

    def __init__(self, sdk: MpesaSDK) -> None:
        self._sdk = sdk

    @property
    def inner(self) -> MpesaSDK:
        return self._sdk

    async def _observe(
        self,
        operation: Operation,
        req: Optional[MpesaRequestDTO],
        call: Call,
    ) -> Any:
        return await call()

    async def get_token(self) -> TokenResponseDTO:
        return await self._observe(Operation.GET_TOKEN, None, self._sdk.get_token)

    async def express_simulate(
        self, req: ExpressSimulateRequestDTO
    ) -> ExpressSimulateResponseDTO:
        return await self._observe(
            Operation.EXPRESS_SIMULATE, req, partial(self._sdk.express_simulate, req)
        )

    async def express_query(self, req: ExpressQueryRequestDTO) -> ExpressQueryResponseDTO:
        return await self._observe(
            Operation.EXPRESS_QUERY, req, partial(self._sdk.express_query, req)
        )

    async def b2c_payment(self, req: B2CPaymentRequestDTO) -> B2CPaymentResponseDTO:
        return await self._observe(
            Operation.B2C_PAYMENT, req, partial(self._sdk.b2c_payment, req)
        )

    async def business_pay_bill(
        self, req: BusinessPayBillRequestDTO
    ) -> BusinessPayBillResponseDTO:
        return await self._observe(
            Operation.BUSINESS_PAY_BILL, req, partial(self._sdk.business_pay_bill, req)
        )

    async def account_balance(
        self, req: AccountBalanceRequestDTO
    ) -> AccountBalanceResponseDTO:
        return await self._observe(
            Operation.ACCOUNT_BALANCE, req, partial(self._sdk.account_balance, req)
        )

    async def c2b_register_url(
        self, req: C2BRegisterURLRequestDTO
    ) -> C2BRegisterURLResponseDTO:
        return await self._observe(
            Operation.C2B_REGISTER_URL, req, partial(self._sdk.c2b_register_url, req)
        )

    async def c2b_simulate(self, req: C2BSimulateRequestDTO) -> C2BSimulateResponseDTO:
        return await self._observe(
            Operation.C2B_SIMULATE, req, partial(self._sdk.c2b_simulate, req)
        )

    async def generate_qr(self, req: GenerateQRRequestDTO) -> GenerateQRResponseDTO:
        return await self._observe(
            Operation.GENERATE_QR, req, partial(self._sdk.generate_qr, req)
        )

    async def reverse(self, req: ReverseRequestDTO) -> ReverseResponseDTO:
        return await self._observe(Operation.REVERSE, req, partial(self._sdk.reverse, req))

    async def transaction_status(
        self, req: TransactionStatusRequestDTO
    ) -> TransactionStatusResponseDTO:
        return await self._observe(
            Operation.TRANSACTION_STATUS,
            req,
            partial(self._sdk.transaction_status, req),
        )

    async def remit_tax(self, req: RemitTaxRequestDTO) -> RemitTaxResponseDTO:
        return await self._observe(
            Operation.REMIT_TAX, req, partial(self._sdk.remit_tax, req)
        )

    async def aclose(self) -> None:
        await self._sdk.aclose()

    async def __aenter__(self) -> "SDKMiddleware":
        return self

    async def __aexit__(
        self,
        exc_type: Optional[Type[BaseException]],
        exc_val: Optional[BaseException],
        exc_tb: Optional[TracebackType],
    ) -> None:
        await self.aclose()
