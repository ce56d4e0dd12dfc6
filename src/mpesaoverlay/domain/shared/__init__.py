"""Shared domain utilities.

This package is domain-accessible and should not depend on application code.
"""

from .sdk_protocol import MpesaSDK, MpesaSDKFactory

__all__ = ["MpesaSDK", "MpesaSDKFactory"]
