"""
Plutus Client Error Model

This module provides the error handling framework for the SDK. Codec and
bridge failures are typed and recoverable; errors raised by the chain data
provider or the wallet are surfaced through their own subclasses and never
reinterpreted by the core.
"""

from __future__ import annotations
from typing import Optional, Dict, Any
from enum import IntEnum


class ErrorCode(IntEnum):
    """Error codes used across the SDK."""

    # Success
    OK = 0

    # General errors (1-99)
    UNKNOWN = 1
    INTERNAL = 2
    NOT_FOUND = 4

    # Encoding errors (100-199)
    ENCODING_ERROR = 100
    INVALID_HEX = 101
    MALFORMED_CBOR = 102
    TRUNCATED_INPUT = 103
    UNSUPPORTED_TAG = 104

    # Network errors (200-299)
    NETWORK_ERROR = 200
    CONNECTION_FAILED = 201
    TIMEOUT = 202
    RATE_LIMITED = 203
    SERVICE_UNAVAILABLE = 204
    HTTP_ERROR = 205

    # Transaction errors (400-499)
    SUBMISSION_REJECTED = 400
    DATUM_NOT_FOUND = 401

    # Validation errors (500-599)
    INVALID_VALUE = 500
    INVALID_UNIT = 501
    INVALID_QUANTITY = 502

    # Wallet errors (700-799)
    WALLET_ERROR = 700
    NO_WALLET_SELECTED = 701
    SIGNING_UNAVAILABLE = 702


class PlutusClientError(Exception):
    """
    Base class for all SDK errors.

    Carries a code, optional structured details and the underlying cause.
    """

    def __init__(self, message: str, code: ErrorCode = ErrorCode.UNKNOWN,
                 details: Optional[Dict[str, Any]] = None, cause: Optional[Exception] = None):
        """
        Initialize an SDK error.

        Args:
            message: Error message
            code: Error code
            details: Additional error details
            cause: Underlying exception that caused this error
        """
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details or {}
        self.cause = cause

    def __str__(self) -> str:
        """String representation of the error."""
        parts = [f"[{self.code.name}] {self.message}"]
        if self.details:
            parts.append(f"Details: {self.details}")
        if self.cause:
            parts.append(f"Caused by: {self.cause}")
        return " | ".join(parts)

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to dictionary representation."""
        result = {
            "code": self.code.value,
            "message": self.message,
        }
        if self.details:
            result["details"] = self.details
        if self.cause:
            result["cause"] = str(self.cause)
        return result

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'PlutusClientError':
        """Create error from dictionary representation."""
        try:
            code = ErrorCode(data.get("code", ErrorCode.UNKNOWN))
        except ValueError:
            code = ErrorCode.UNKNOWN
        message = data.get("message", "Unknown error")
        details = data.get("details")
        return cls(message, code, details)


class EncodingError(PlutusClientError):
    """Data encoding/decoding errors."""

    def __init__(self, message: str, code: ErrorCode = ErrorCode.ENCODING_ERROR,
                 details: Optional[Dict[str, Any]] = None, cause: Optional[Exception] = None):
        super().__init__(message, code, details, cause)


class FormatError(EncodingError):
    """Malformed, truncated or unsupported input handed to the decoder."""

    def __init__(self, message: str, code: ErrorCode = ErrorCode.MALFORMED_CBOR,
                 details: Optional[Dict[str, Any]] = None, cause: Optional[Exception] = None):
        super().__init__(message, code, details, cause)


class ValidationError(PlutusClientError):
    """A value, unit identifier or quantity of the wrong shape."""

    def __init__(self, message: str, code: ErrorCode = ErrorCode.INVALID_VALUE,
                 details: Optional[Dict[str, Any]] = None, cause: Optional[Exception] = None):
        super().__init__(message, code, details, cause)


class ProviderError(PlutusClientError):
    """Errors surfaced by a chain data provider."""

    def __init__(self, message: str, code: ErrorCode = ErrorCode.NETWORK_ERROR,
                 details: Optional[Dict[str, Any]] = None, cause: Optional[Exception] = None):
        super().__init__(message, code, details, cause)


class DatumNotFoundError(ProviderError):
    """The provider has no datum for the requested hash."""

    def __init__(self, message: str = "Datum not found",
                 details: Optional[Dict[str, Any]] = None, cause: Optional[Exception] = None):
        super().__init__(message, ErrorCode.DATUM_NOT_FOUND, details, cause)


class SubmissionError(ProviderError):
    """The ledger rejected a submitted transaction."""

    def __init__(self, message: str = "Transaction rejected",
                 details: Optional[Dict[str, Any]] = None, cause: Optional[Exception] = None):
        super().__init__(message, ErrorCode.SUBMISSION_REJECTED, details, cause)


class WalletError(PlutusClientError):
    """Wallet-specific errors."""

    def __init__(self, message: str, code: ErrorCode = ErrorCode.WALLET_ERROR,
                 details: Optional[Dict[str, Any]] = None, cause: Optional[Exception] = None):
        super().__init__(message, code, details, cause)


class ErrorHandler:
    """
    Utility class for handling and categorizing errors.
    """

    @staticmethod
    def is_retryable(error: Exception) -> bool:
        """
        Check if an error is retryable.

        Args:
            error: Exception to check

        Returns:
            True if the error should be retried
        """
        if isinstance(error, PlutusClientError):
            return error.code in (ErrorCode.NETWORK_ERROR, ErrorCode.CONNECTION_FAILED,
                                  ErrorCode.TIMEOUT, ErrorCode.RATE_LIMITED,
                                  ErrorCode.SERVICE_UNAVAILABLE, ErrorCode.INTERNAL)
        return False


__all__ = [
    "ErrorCode",
    "PlutusClientError",
    "EncodingError",
    "FormatError",
    "ValidationError",
    "ProviderError",
    "DatumNotFoundError",
    "SubmissionError",
    "WalletError",
    "ErrorHandler",
]
