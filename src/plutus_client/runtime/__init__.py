"""Runtime helpers for the Plutus client SDK"""

from .errors import (
    ErrorCode,
    PlutusClientError,
    EncodingError,
    FormatError,
    ValidationError,
    ProviderError,
    DatumNotFoundError,
    SubmissionError,
    WalletError,
    ErrorHandler,
)

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
