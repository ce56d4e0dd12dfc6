"""Descriptor table of the gateway operations.

The table is built once at import time and never mutated. Per-instance path
overrides produce a fresh mapping via ``resolve_paths``.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Mapping, Optional, Type

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
    ExpressQueryResponseDTO,
    ExpressSimulateResponseDTO,
    GenerateQRResponseDTO,
    MpesaResponseDTO,
    RemitTaxResponseDTO,
    ReverseResponseDTO,
    TokenResponseDTO,
    TransactionStatusResponseDTO,
)

# Word boundaries in CamelCase names; acronyms such as QR or URL stay whole.
_WORD_BOUNDARY = re.compile(r"(?<=[a-z])(?=[A-Z])|(?<=[A-Z])(?=[A-Z][a-z])")


class Operation(str, Enum):
    GET_TOKEN = "GetToken"
    EXPRESS_SIMULATE = "ExpressSimulate"
    EXPRESS_QUERY = "ExpressQuery"
    B2C_PAYMENT = "B2CPayment"
    BUSINESS_PAY_BILL = "BusinessPayBill"
    ACCOUNT_BALANCE = "AccountBalance"
    C2B_REGISTER_URL = "C2BRegisterURL"
    C2B_SIMULATE = "C2BSimulate"
    GENERATE_QR = "GenerateQR"
    REVERSE = "Reverse"
    TRANSACTION_STATUS = "TransactionStatus"
    REMIT_TAX = "RemitTax"

    @property
    def snake_name(self) -> str:
        """Return the snake_case name, which is also the SDK method name."""
        return _WORD_BOUNDARY.sub("_", self.value).lower()


@dataclass(frozen=True)
class OperationSpec:
    """Static description of one gateway operation."""

    operation: Operation
    method: str
    path: str
    response_type: Type[MpesaResponseDTO]
    request_type: Optional[Type[MpesaRequestDTO]] = None
    requires_security_credential: bool = False


AUTH_PATH = "oauth/v1/generate?grant_type=client_credentials"

OPERATIONS: Mapping[Operation, OperationSpec] = MappingProxyType(
    {
        spec.operation: spec
        for spec in (
            OperationSpec(Operation.GET_TOKEN, "GET", AUTH_PATH, TokenResponseDTO),
            OperationSpec(
                Operation.EXPRESS_SIMULATE,
                "POST",
                "mpesa/stkpush/v1/processrequest",
                ExpressSimulateResponseDTO,
                ExpressSimulateRequestDTO,
            ),
            OperationSpec(
                Operation.EXPRESS_QUERY,
                "POST",
                "mpesa/stkpush/v1/query",
                ExpressQueryResponseDTO,
                ExpressQueryRequestDTO,
            ),
            OperationSpec(
                Operation.B2C_PAYMENT,
                "POST",
                "mpesa/b2c/v1/paymentrequest",
                B2CPaymentResponseDTO,
                B2CPaymentRequestDTO,
                requires_security_credential=True,
            ),
            OperationSpec(
                Operation.BUSINESS_PAY_BILL,
                "POST",
                "mpesa/b2b/v1/paymentrequest",
                BusinessPayBillResponseDTO,
                BusinessPayBillRequestDTO,
                requires_security_credential=True,
            ),
            OperationSpec(
                Operation.ACCOUNT_BALANCE,
                "POST",
                "mpesa/accountbalance/v1/query",
                AccountBalanceResponseDTO,
                AccountBalanceRequestDTO,
                requires_security_credential=True,
            ),
            OperationSpec(
                Operation.C2B_REGISTER_URL,
                "POST",
                "mpesa/c2b/v1/registerurl",
                C2BRegisterURLResponseDTO,
                C2BRegisterURLRequestDTO,
            ),
            OperationSpec(
                Operation.C2B_SIMULATE,
                "POST",
                "mpesa/c2b/v1/simulate",
                C2BSimulateResponseDTO,
                C2BSimulateRequestDTO,
            ),
            OperationSpec(
                Operation.GENERATE_QR,
                "POST",
                "mpesa/qrcode/v1/generate",
                GenerateQRResponseDTO,
                GenerateQRRequestDTO,
            ),
            OperationSpec(
                Operation.REVERSE,
                "POST",
                "mpesa/reversal/v1/request",
                ReverseResponseDTO,
                ReverseRequestDTO,
                requires_security_credential=True,
            ),
            OperationSpec(
                Operation.TRANSACTION_STATUS,
                "POST",
                "mpesa/transactionstatus/v1/query",
                TransactionStatusResponseDTO,
                TransactionStatusRequestDTO,
                requires_security_credential=True,
            ),
            OperationSpec(
                Operation.REMIT_TAX,
                "POST",
                "mpesa/b2b/v1/remittax",
                RemitTaxResponseDTO,
                RemitTaxRequestDTO,
                requires_security_credential=True,
            ),
        )
    }
)


def resolve_paths(
    overrides: Optional[Mapping[Operation, str]] = None,
) -> Mapping[Operation, str]:
    """Return the endpoint path of every operation, applying ``overrides``."""
    paths = {op: spec.path for op, spec in OPERATIONS.items()}
    for op, path in (overrides or {}).items():
        paths[Operation(op)] = path.lstrip("/")
    return MappingProxyType(paths)
