"""Pure validation functions for gateway requests.

These functions contain the business rules each operation enforces before
anything is sent over the network. Each validator raises the first rule it
finds violated; the order of the checks is part of the contract.
"""

from __future__ import annotations

from typing import Callable, Dict, Optional, Type
from urllib.parse import urlparse

from ..domain.errors import ErrorKind, ValidationError
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

MAX_ACCOUNT_REFERENCE_LEN = 12
MAX_TRANSACTION_DESC_LEN = 13
MAX_REMARKS_LEN = 100
MAX_OCCASION_LEN = 100

MIN_PHONE_NUMBER = 100_000_000_000
MAX_PHONE_NUMBER = 999_999_999_999
MIN_SHORT_CODE = 10_000
MAX_SHORT_CODE = 9_999_999

CUSTOMER_PAY_BILL_ONLINE = "CustomerPayBillOnline"
CUSTOMER_BUY_GOODS_ONLINE = "CustomerBuyGoodsOnline"
C2B_COMMAND_IDS = frozenset({CUSTOMER_PAY_BILL_ONLINE, CUSTOMER_BUY_GOODS_ONLINE})
B2C_COMMAND_IDS = frozenset({"BusinessPayment", "SalaryPayment", "PromotionPayment"})
C2B_RESPONSE_TYPES = frozenset({"Completed", "Cancelled"})
QR_TRANSACTION_CODES = frozenset({"SB", "SM", "PB", "WA", "BG"})
IDENTIFIER_TYPES = frozenset({1, 2, 4})


def is_phone_number(number: Optional[int]) -> bool:
    """MSISDN with country code, 12 digits, e.g. 2547XXXXXXXX."""
    if number is None:
        return False
    return MIN_PHONE_NUMBER <= number <= MAX_PHONE_NUMBER


def is_short_code(number: Optional[int]) -> bool:
    """Paybill or till number, 5 to 7 digits, e.g. 654321."""
    if number is None:
        return False
    return MIN_SHORT_CODE <= number <= MAX_SHORT_CODE


def is_valid_url(value: Optional[str]) -> bool:
    if not value:
        return False
    try:
        parsed = urlparse(value)
        # Accessing the port validates it; a bad port raises ValueError.
        parsed.port
    except ValueError:
        return False
    if parsed.scheme not in ("http", "https"):
        return False
    return bool(parsed.netloc) and bool(parsed.hostname)


def exceeds(value: Optional[str], limit: int) -> bool:
    """True when ``value`` is longer than ``limit`` bytes once UTF-8 encoded."""
    if not value:
        return False
    return len(value.encode("utf-8")) > limit


def _require(condition: bool, kind: ErrorKind) -> None:
    if not condition:
        raise ValidationError(kind)


def validate_express_simulate(req: ExpressSimulateRequestDTO) -> None:
    """Validate an STK push request.

    Raises:
        ValidationError: On the first violated rule.
    """
    _require(is_short_code(req.business_short_code), ErrorKind.INVALID_SHORT_CODE)
    _require(
        req.transaction_type in C2B_COMMAND_IDS, ErrorKind.INVALID_TRANSACTION_TYPE
    )
    _require(
        is_phone_number(req.party_a) and is_phone_number(req.phone_number),
        ErrorKind.INVALID_PHONE_NUMBER,
    )
    _require(is_short_code(req.party_b), ErrorKind.INVALID_SHORT_CODE)
    _require(
        not exceeds(req.account_reference, MAX_ACCOUNT_REFERENCE_LEN),
        ErrorKind.INVALID_ACCOUNT_REFERENCE,
    )
    _require(
        not exceeds(req.transaction_desc, MAX_TRANSACTION_DESC_LEN),
        ErrorKind.INVALID_TRANSACTION_DESC,
    )
    _require(is_valid_url(req.callback_url), ErrorKind.INVALID_URL)


def validate_express_query(req: ExpressQueryRequestDTO) -> None:
    _require(is_short_code(req.business_short_code), ErrorKind.INVALID_SHORT_CODE)


def validate_generate_qr(req: GenerateQRRequestDTO) -> None:
    _require(req.trx_code in QR_TRANSACTION_CODES, ErrorKind.INVALID_TRANSACTION_TYPE)


def validate_c2b_register_url(req: C2BRegisterURLRequestDTO) -> None:
    _require(is_short_code(req.short_code), ErrorKind.INVALID_SHORT_CODE)
    _require(req.response_type in C2B_RESPONSE_TYPES, ErrorKind.INVALID_RESPONSE_TYPE)
    _require(
        is_valid_url(req.validation_url) and is_valid_url(req.confirmation_url),
        ErrorKind.INVALID_URL,
    )


def validate_c2b_simulate(req: C2BSimulateRequestDTO) -> None:
    _require(req.command_id in C2B_COMMAND_IDS, ErrorKind.INVALID_COMMAND_ID)
    _require(is_short_code(req.short_code), ErrorKind.INVALID_SHORT_CODE)


def validate_b2c_payment(req: B2CPaymentRequestDTO) -> None:
    """Validate a business to customer payment.

    Raises:
        ValidationError: On the first violated rule.
    """
    _require(req.command_id in B2C_COMMAND_IDS, ErrorKind.INVALID_COMMAND_ID)
    _require(is_short_code(req.party_a), ErrorKind.INVALID_SHORT_CODE)
    _require(is_phone_number(req.party_b), ErrorKind.INVALID_PHONE_NUMBER)
    _require(
        is_valid_url(req.queue_timeout_url) and is_valid_url(req.result_url),
        ErrorKind.INVALID_URL,
    )
    _require(not exceeds(req.remarks, MAX_REMARKS_LEN), ErrorKind.INVALID_REMARKS)
    _require(not exceeds(req.occasion, MAX_OCCASION_LEN), ErrorKind.INVALID_OCCASION)


def validate_business_pay_bill(req: BusinessPayBillRequestDTO) -> None:
    """Validate a business to business bill payment.

    Raises:
        ValidationError: On the first violated rule.
    """
    _require(req.command_id == "BusinessPayBill", ErrorKind.INVALID_COMMAND_ID)
    _require(
        req.sender_identifier_type in IDENTIFIER_TYPES,
        ErrorKind.INVALID_IDENTIFIER_TYPE,
    )
    _require(
        req.receiver_identifier_type in IDENTIFIER_TYPES,
        ErrorKind.INVALID_IDENTIFIER_TYPE,
    )
    _require(is_short_code(req.party_a), ErrorKind.INVALID_SHORT_CODE)
    _require(is_short_code(req.party_b), ErrorKind.INVALID_SHORT_CODE)
    _require(
        is_valid_url(req.queue_timeout_url) and is_valid_url(req.result_url),
        ErrorKind.INVALID_URL,
    )
    _require(not exceeds(req.remarks, MAX_REMARKS_LEN), ErrorKind.INVALID_REMARKS)
    _require(
        not exceeds(req.account_reference, MAX_ACCOUNT_REFERENCE_LEN),
        ErrorKind.INVALID_ACCOUNT_REFERENCE,
    )


def validate_account_balance(req: AccountBalanceRequestDTO) -> None:
    _require(req.command_id == "AccountBalance", ErrorKind.INVALID_COMMAND_ID)
    _require(req.identifier_type in IDENTIFIER_TYPES, ErrorKind.INVALID_IDENTIFIER_TYPE)
    _require(
        is_valid_url(req.queue_timeout_url) and is_valid_url(req.result_url),
        ErrorKind.INVALID_URL,
    )
    _require(not exceeds(req.remarks, MAX_REMARKS_LEN), ErrorKind.INVALID_REMARKS)
    _require(is_short_code(req.party_a), ErrorKind.INVALID_SHORT_CODE)


def validate_reverse(req: ReverseRequestDTO) -> None:
    _require(req.command_id == "TransactionReversal", ErrorKind.INVALID_COMMAND_ID)
    _require(
        is_valid_url(req.queue_timeout_url) and is_valid_url(req.result_url),
        ErrorKind.INVALID_URL,
    )
    _require(not exceeds(req.remarks, MAX_REMARKS_LEN), ErrorKind.INVALID_REMARKS)
    _require(not exceeds(req.occasion, MAX_OCCASION_LEN), ErrorKind.INVALID_OCCASION)


def validate_transaction_status(req: TransactionStatusRequestDTO) -> None:
    _require(req.command_id == "TransactionStatusQuery", ErrorKind.INVALID_COMMAND_ID)
    _require(not exceeds(req.remarks, MAX_REMARKS_LEN), ErrorKind.INVALID_REMARKS)
    _require(not exceeds(req.occasion, MAX_OCCASION_LEN), ErrorKind.INVALID_OCCASION)
    _require(req.identifier_type in IDENTIFIER_TYPES, ErrorKind.INVALID_IDENTIFIER_TYPE)
    _require(
        is_valid_url(req.queue_timeout_url) and is_valid_url(req.result_url),
        ErrorKind.INVALID_URL,
    )


def validate_remit_tax(req: RemitTaxRequestDTO) -> None:
    _require(req.command_id == "PayTaxToKRA", ErrorKind.INVALID_COMMAND_ID)
    _require(not exceeds(req.remarks, MAX_REMARKS_LEN), ErrorKind.INVALID_REMARKS)
    _require(
        is_valid_url(req.queue_timeout_url) and is_valid_url(req.result_url),
        ErrorKind.INVALID_URL,
    )
    _require(
        is_short_code(req.party_a) and is_short_code(req.party_b),
        ErrorKind.INVALID_SHORT_CODE,
    )
    _require(
        not exceeds(req.account_reference, MAX_ACCOUNT_REFERENCE_LEN),
        ErrorKind.INVALID_ACCOUNT_REFERENCE,
    )


VALIDATORS: Dict[Type[MpesaRequestDTO], Callable[..., None]] = {
    ExpressSimulateRequestDTO: validate_express_simulate,
    ExpressQueryRequestDTO: validate_express_query,
    B2CPaymentRequestDTO: validate_b2c_payment,
    BusinessPayBillRequestDTO: validate_business_pay_bill,
    AccountBalanceRequestDTO: validate_account_balance,
    C2BRegisterURLRequestDTO: validate_c2b_register_url,
    C2BSimulateRequestDTO: validate_c2b_simulate,
    GenerateQRRequestDTO: validate_generate_qr,
    ReverseRequestDTO: validate_reverse,
    TransactionStatusRequestDTO: validate_transaction_status,
    RemitTaxRequestDTO: validate_remit_tax,
}


def validate(request: MpesaRequestDTO) -> None:
    """Validate any request DTO with the rule set of its operation.

    Raises:
        ValidationError: On the first violated rule.
        TypeError: If ``request`` is not a known request DTO.
    """
    validator = VALIDATORS.get(type(request))
    if validator is None:
        raise TypeError(f"No validation rules for {type(request).__name__}")
    validator(request)
