"""Request DTOs for the gateway operations.

Attributes are snake_case; aliases are the gateway's wire names. Either form
is accepted on construction.
"""

from __future__ import annotations

from typing import Any, ClassVar, Dict, FrozenSet, Optional

from pydantic import BaseModel, ConfigDict, Field


class MpesaRequestDTO(BaseModel):
    """Common behaviour shared by every request DTO."""

    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    # Fields that must never leave the process except inside the request body
    # the gateway expects them in.
    SECRET_FIELDS: ClassVar[FrozenSet[str]] = frozenset()

    def to_payload(self) -> Dict[str, Any]:
        """Return the JSON body sent to the gateway."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)

    def to_record(self) -> Dict[str, Any]:
        """Return a representation safe to log or persist."""
        return self.model_dump(
            mode="json",
            by_alias=True,
            exclude_none=True,
            exclude=set(self.SECRET_FIELDS),
        )


class ExpressSimulateRequestDTO(MpesaRequestDTO):
    """Initiate an M-Pesa Express (STK push) payment on behalf of a customer."""

    SECRET_FIELDS: ClassVar[FrozenSet[str]] = frozenset({"pass_key", "password"})

    pass_key: Optional[str] = Field(None, alias="PassKey", exclude=True)
    business_short_code: Optional[int] = Field(None, alias="BusinessShortCode")
    password: Optional[str] = Field(None, alias="Password")
    timestamp: Optional[str] = Field(None, alias="Timestamp")
    transaction_type: Optional[str] = Field(None, alias="TransactionType")
    amount: Optional[int] = Field(None, alias="Amount")
    party_a: Optional[int] = Field(None, alias="PartyA")
    party_b: Optional[int] = Field(None, alias="PartyB")
    phone_number: Optional[int] = Field(None, alias="PhoneNumber")
    callback_url: Optional[str] = Field(None, alias="CallBackURL")
    account_reference: Optional[str] = Field(None, alias="AccountReference")
    transaction_desc: Optional[str] = Field(None, alias="TransactionDesc")


class ExpressQueryRequestDTO(MpesaRequestDTO):
    """Query the status of an M-Pesa Express payment."""

    SECRET_FIELDS: ClassVar[FrozenSet[str]] = frozenset({"pass_key", "password"})

    pass_key: Optional[str] = Field(None, alias="PassKey", exclude=True)
    business_short_code: Optional[int] = Field(None, alias="BusinessShortCode")
    password: Optional[str] = Field(None, alias="Password")
    timestamp: Optional[str] = Field(None, alias="Timestamp")
    checkout_request_id: Optional[str] = Field(None, alias="CheckoutRequestID")


class B2CPaymentRequestDTO(MpesaRequestDTO):
    """Send money from a business short code to a customer phone number."""

    SECRET_FIELDS: ClassVar[FrozenSet[str]] = frozenset(
        {"initiator_password", "security_credential"}
    )

    originator_conversation_id: Optional[str] = Field(
        None, alias="OriginatorConversationID"
    )
    initiator_name: Optional[str] = Field(None, alias="InitiatorName")
    initiator_password: Optional[str] = Field(
        None, alias="InitiatorPassword", exclude=True
    )
    security_credential: Optional[str] = Field(None, alias="SecurityCredential")
    command_id: Optional[str] = Field(None, alias="CommandID")
    amount: Optional[int] = Field(None, alias="Amount")
    party_a: Optional[int] = Field(None, alias="PartyA")
    party_b: Optional[int] = Field(None, alias="PartyB")
    remarks: Optional[str] = Field(None, alias="Remarks")
    queue_timeout_url: Optional[str] = Field(None, alias="QueueTimeOutURL")
    result_url: Optional[str] = Field(None, alias="ResultURL")
    occasion: Optional[str] = Field(None, alias="Occassion")


class BusinessPayBillRequestDTO(MpesaRequestDTO):
    """Pay a bill from one business short code to another."""

    SECRET_FIELDS: ClassVar[FrozenSet[str]] = frozenset(
        {"initiator_password", "security_credential"}
    )

    initiator_name: Optional[str] = Field(None, alias="Initiator")
    initiator_password: Optional[str] = Field(
        None, alias="InitiatorPassword", exclude=True
    )
    security_credential: Optional[str] = Field(None, alias="SecurityCredential")
    command_id: Optional[str] = Field(None, alias="CommandID")
    sender_identifier_type: Optional[int] = Field(None, alias="SenderIdentifierType")
    receiver_identifier_type: Optional[int] = Field(
        None, alias="RecieverIdentifierType"
    )
    amount: Optional[int] = Field(None, alias="Amount")
    party_a: Optional[int] = Field(None, alias="PartyA")
    party_b: Optional[int] = Field(None, alias="PartyB")
    account_reference: Optional[str] = Field(None, alias="AccountReference")
    requester: Optional[int] = Field(None, alias="Requester")
    remarks: Optional[str] = Field(None, alias="Remarks")
    queue_timeout_url: Optional[str] = Field(None, alias="QueueTimeOutURL")
    result_url: Optional[str] = Field(None, alias="ResultURL")


class AccountBalanceRequestDTO(MpesaRequestDTO):
    """Enquire the balance of a short code."""

    SECRET_FIELDS: ClassVar[FrozenSet[str]] = frozenset(
        {"initiator_password", "security_credential"}
    )

    initiator_name: Optional[str] = Field(None, alias="Initiator")
    initiator_password: Optional[str] = Field(
        None, alias="InitiatorPassword", exclude=True
    )
    security_credential: Optional[str] = Field(None, alias="SecurityCredential")
    command_id: Optional[str] = Field(None, alias="CommandID")
    party_a: Optional[int] = Field(None, alias="PartyA")
    identifier_type: Optional[int] = Field(None, alias="IdentifierType")
    remarks: Optional[str] = Field(None, alias="Remarks")
    queue_timeout_url: Optional[str] = Field(None, alias="QueueTimeOutURL")
    result_url: Optional[str] = Field(None, alias="ResultURL")


class C2BRegisterURLRequestDTO(MpesaRequestDTO):
    """Register validation and confirmation URLs for a short code."""

    short_code: Optional[int] = Field(None, alias="ShortCode")
    response_type: Optional[str] = Field(None, alias="ResponseType")
    confirmation_url: Optional[str] = Field(None, alias="ConfirmationURL")
    validation_url: Optional[str] = Field(None, alias="ValidationURL")


class C2BSimulateRequestDTO(MpesaRequestDTO):
    """Simulate a customer paying a business (sandbox only)."""

    short_code: Optional[int] = Field(None, alias="ShortCode")
    command_id: Optional[str] = Field(None, alias="CommandID")
    amount: Optional[int] = Field(None, alias="Amount")
    msisdn: Optional[str] = Field(None, alias="Msisdn")
    bill_ref_number: Optional[str] = Field(None, alias="BillRefNumber")


class GenerateQRRequestDTO(MpesaRequestDTO):
    """Generate a dynamic M-Pesa QR code."""

    merchant_name: Optional[str] = Field(None, alias="MerchantName")
    ref_no: Optional[str] = Field(None, alias="RefNo")
    amount: Optional[int] = Field(None, alias="Amount")
    trx_code: Optional[str] = Field(None, alias="TrxCode")
    cpi: Optional[str] = Field(None, alias="CPI")
    size: Optional[str] = Field(None, alias="Size")


class ReverseRequestDTO(MpesaRequestDTO):
    """Reverse a completed M-Pesa transaction."""

    SECRET_FIELDS: ClassVar[FrozenSet[str]] = frozenset(
        {"initiator_password", "security_credential"}
    )

    initiator_name: Optional[str] = Field(None, alias="Initiator")
    initiator_password: Optional[str] = Field(
        None, alias="InitiatorPassword", exclude=True
    )
    security_credential: Optional[str] = Field(None, alias="SecurityCredential")
    command_id: Optional[str] = Field(None, alias="CommandID")
    transaction_id: Optional[str] = Field(None, alias="TransactionID")
    amount: Optional[int] = Field(None, alias="Amount")
    receiver_party: Optional[int] = Field(None, alias="ReceiverParty")
    receiver_identifier_type: Optional[int] = Field(
        None, alias="RecieverIdentifierType"
    )
    remarks: Optional[str] = Field(None, alias="Remarks")
    queue_timeout_url: Optional[str] = Field(None, alias="QueueTimeOutURL")
    result_url: Optional[str] = Field(None, alias="ResultURL")
    occasion: Optional[str] = Field(None, alias="Occasion")


class TransactionStatusRequestDTO(MpesaRequestDTO):
    """Check the status of a transaction."""

    SECRET_FIELDS: ClassVar[FrozenSet[str]] = frozenset(
        {"initiator_password", "security_credential"}
    )

    initiator_name: Optional[str] = Field(None, alias="Initiator")
    initiator_password: Optional[str] = Field(
        None, alias="InitiatorPassword", exclude=True
    )
    security_credential: Optional[str] = Field(None, alias="SecurityCredential")
    command_id: Optional[str] = Field(None, alias="CommandID")
    transaction_id: Optional[str] = Field(None, alias="TransactionID")
    original_conversation_id: Optional[str] = Field(
        None, alias="OriginalConversationID"
    )
    party_a: Optional[int] = Field(None, alias="PartyA")
    identifier_type: Optional[int] = Field(None, alias="IdentifierType")
    remarks: Optional[str] = Field(None, alias="Remarks")
    queue_timeout_url: Optional[str] = Field(None, alias="QueueTimeOutURL")
    result_url: Optional[str] = Field(None, alias="ResultURL")
    occasion: Optional[str] = Field(None, alias="Occasion")


class RemitTaxRequestDTO(MpesaRequestDTO):
    """Remit tax to the Kenya Revenue Authority."""

    SECRET_FIELDS: ClassVar[FrozenSet[str]] = frozenset(
        {"initiator_password", "security_credential"}
    )

    initiator_name: Optional[str] = Field(None, alias="Initiator")
    initiator_password: Optional[str] = Field(
        None, alias="InitiatorPassword", exclude=True
    )
    security_credential: Optional[str] = Field(None, alias="SecurityCredential")
    command_id: Optional[str] = Field(None, alias="CommandID")
    sender_identifier_type: Optional[int] = Field(None, alias="SenderIdentifierType")
    receiver_identifier_type: Optional[int] = Field(
        None, alias="RecieverIdentifierType"
    )
    amount: Optional[int] = Field(None, alias="Amount")
    party_a: Optional[int] = Field(None, alias="PartyA")
    party_b: Optional[int] = Field(None, alias="PartyB")
    account_reference: Optional[str] = Field(None, alias="AccountReference")
    remarks: Optional[str] = Field(None, alias="Remarks")
    queue_timeout_url: Optional[str] = Field(None, alias="QueueTimeOutURL")
    result_url: Optional[str] = Field(None, alias="ResultURL")
