"""Response envelopes returned by the gateway."""

from __future__ import annotations

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class MpesaResponseDTO(BaseModel):
    """Base for every envelope; unknown fields from the gateway are ignored.

    The gateway sends some codes as numbers and others as strings, so numbers
    are coerced to str.
    """

    model_config = ConfigDict(
        populate_by_name=True, extra="ignore", coerce_numbers_to_str=True
    )


class TokenResponseDTO(MpesaResponseDTO):
    """Time bound access token used to call the other endpoints."""

    access_token: str = Field("", alias="access_token")
    expiry: str = Field("", alias="expires_in")


class ErrorResponseDTO(MpesaResponseDTO):
    """Structured error envelope the gateway sends on failure."""

    request_id: str = Field("", alias="requestId")
    code: str = Field("", alias="errorCode")
    message: str = Field("", alias="errorMessage")


class ValidResponseDTO(MpesaResponseDTO):
    """Acknowledgement shared by most write operations."""

    # The gateway spells this key both ways depending on the endpoint.
    originator_conversation_id: str = Field(
        "",
        validation_alias=AliasChoices(
            "OriginatorConversationID",
            "OriginatorCoversationID",
            "originator_conversation_id",
        ),
        serialization_alias="OriginatorConversationID",
    )
    conversation_id: str = Field("", alias="ConversationID")
    response_description: str = Field("", alias="ResponseDescription")
    response_code: str = Field("", alias="ResponseCode")


class B2CPaymentResponseDTO(ValidResponseDTO):
    pass


class BusinessPayBillResponseDTO(ValidResponseDTO):
    pass


class AccountBalanceResponseDTO(ValidResponseDTO):
    pass


class C2BRegisterURLResponseDTO(ValidResponseDTO):
    pass


class C2BSimulateResponseDTO(ValidResponseDTO):
    pass


class ReverseResponseDTO(ValidResponseDTO):
    pass


class TransactionStatusResponseDTO(ValidResponseDTO):
    pass


class RemitTaxResponseDTO(ValidResponseDTO):
    pass


class ExpressSimulateResponseDTO(MpesaResponseDTO):
    """Acknowledgement of an STK push submission."""

    response_description: str = Field("", alias="ResponseDescription")
    response_code: str = Field("", alias="ResponseCode")
    merchant_request_id: str = Field("", alias="MerchantRequestID")
    checkout_request_id: str = Field("", alias="CheckoutRequestID")
    customer_message: str = Field("", alias="CustomerMessage")


class ExpressQueryResponseDTO(ExpressSimulateResponseDTO):
    """Processing status of an STK push."""

    result_code: str = Field("", alias="ResultCode")
    result_desc: str = Field("", alias="ResultDesc")


class GenerateQRResponseDTO(MpesaResponseDTO):
    """Dynamic QR code payload."""

    response_description: str = Field("", alias="ResponseDescription")
    response_code: str = Field("", alias="ResponseCode")
    request_id: str = Field("", alias="RequestID")
    qr_code: str = Field("", alias="QRCode")
