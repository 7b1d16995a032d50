"""
settleid Exception Hierarchy

All exceptions inherit from SettleIdError for easy catching.

    SettleIdError
     ├── InvalidInput
     │    └── EncodingError
     ├── SchemaVersionMismatch
     └── DuplicateSettlementError
"""


class SettleIdError(Exception):
    """Base exception for all settleid errors"""

    def __init__(self, message: str, details: dict = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self):
        if self.details:
            details_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
            return f"{self.message} ({details_str})"
        return self.message


class InvalidInput(SettleIdError):
    """Raised when a field value is outside its declared domain"""
    pass


class EncodingError(InvalidInput):
    """Raised when a value cannot be represented in its fixed-width encoding"""
    pass


class SchemaVersionMismatch(SettleIdError):
    """
    Raised when asked to encode or verify under a schema version
    this implementation does not know. Never falls back to another layout.
    """
    pass


class DuplicateSettlementError(SettleIdError):
    """Raised when the same Settlement ID is registered twice"""
    pass


class ZeroExpiryWarning(UserWarning):
    """
    Emitted when expiry is explicitly 0.

    expiry=0 and expiry=None produce the same bytes, so the resulting
    Settlement ID cannot tell "expires at epoch 0" from "never expires".
    """
    pass
