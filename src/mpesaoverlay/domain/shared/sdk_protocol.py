"""Protocol interface for SDK implementations.

The dispatcher and every middleware satisfy this protocol, so middlewares can
wrap each other in any order and transports only ever see ``MpesaSDK``.
"""

from __future__ import annotations

from typing import Callable, Optional, Protocol, Type, TYPE_CHECKING
from types import TracebackType

if TYPE_CHECKING:
    # Avoid circular imports by only importing types during type checking
    from ...application.request_dtos import (
        AccountBalanceRequestDTO,
        B2CPaymentRequestDTO,
        BusinessPayBillRequestDTO,
        C2BRegisterURLRequestDTO,
        C2BSimulateRequestDTO,
        ExpressQueryRequestDTO,
        ExpressSimulateRequestDTO,
        GenerateQRRequestDTO,
        RemitTaxRequestDTO,
        ReverseRequestDTO,
        TransactionStatusRequestDTO,
    )
    from ...application.response_dtos import (
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


class MpesaSDK(Protocol):
    """Protocol defining the gateway operations.

    Every method returns the operation's envelope or raises an
    ``MpesaError`` subclass.
    """

    async def get_token(self) -> "TokenResponseDTO":
        """Get a time bound access token."""
        ...

    async def express_simulate(
        self, req: "ExpressSimulateRequestDTO"
    ) -> "ExpressSimulateResponseDTO":
        """Initiate an online payment on behalf of a customer (STK push)."""
        ...

    async def express_query(
        self, req: "ExpressQueryRequestDTO"
    ) -> "ExpressQueryResponseDTO":
        """Check the status of an STK push."""
        ...

    async def b2c_payment(self, req: "B2CPaymentRequestDTO") -> "B2CPaymentResponseDTO":
        """Pay a customer phone number from a business short code."""
        ...

    async def business_pay_bill(
        self, req: "BusinessPayBillRequestDTO"
    ) -> "BusinessPayBillResponseDTO":
        """Pay a bill from one business short code to another."""
        ...

    async def account_balance(
        self, req: "AccountBalanceRequestDTO"
    ) -> "AccountBalanceResponseDTO":
        """Enquire the balance of a short code."""
        ...

    async def c2b_register_url(
        self, req: "C2BRegisterURLRequestDTO"
    ) -> "C2BRegisterURLResponseDTO":
        """Register validation and confirmation URLs."""
        ...

    async def c2b_simulate(
        self, req: "C2BSimulateRequestDTO"
    ) -> "C2BSimulateResponseDTO":
        """Simulate a customer to business payment."""
        ...

    async def generate_qr(self, req: "GenerateQRRequestDTO") -> "GenerateQRResponseDTO":
        """Generate a dynamic QR code."""
        ...

    async def reverse(self, req: "ReverseRequestDTO") -> "ReverseResponseDTO":
        """Reverse a transaction."""
        ...

    async def transaction_status(
        self, req: "TransactionStatusRequestDTO"
    ) -> "TransactionStatusResponseDTO":
        """Check the status of a transaction."""
        ...

    async def remit_tax(self, req: "RemitTaxRequestDTO") -> "RemitTaxResponseDTO":
        """Remit tax to the Kenya Revenue Authority."""
        ...

    async def aclose(self) -> None:
        """Release the underlying HTTP resources."""
        ...

    async def __aenter__(self: "MpesaSDK") -> "MpesaSDK":
        ...

    async def __aexit__(
        self,
        exc_type: Optional[Type[BaseException]],
        exc_val: Optional[BaseException],
        exc_tb: Optional[TracebackType],
    ) -> None:
        ...


# A middleware factory wraps one SDK into another with the same interface.
MpesaSDKFactory = Callable[[MpesaSDK], MpesaSDK]
