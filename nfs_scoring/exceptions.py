"""
NFS Scoring Engine - Exceptions.

============================================================
CUSTOM EXCEPTIONS
============================================================

- NfsScoringError: Base exception
- EnterpriseNotFoundError: Referenced enterprise does not exist
- CalculationNotFoundError: Stored calculation does not exist
- InvalidRequestError: Payload failed validation
- ConfigurationError: Invalid weights or thresholds

============================================================
FAILURE SAFETY
============================================================

The scorers and the composer never raise for numeric input.
These exceptions come from the layers around the engine
(binding, lookup, persistence, configuration). Inside a batch
they are caught per item and turned into a failed slot.

============================================================
"""

from typing import Any, Dict, Optional


class NfsScoringError(Exception):
    """
    Base exception for NFS scoring errors.

    All NFS exceptions inherit from this class.
    """

    def __init__(
        self,
        message: str,
        enterprise_id: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        """
        Initialize exception.

        Args:
            message: Error message
            enterprise_id: Enterprise the error relates to
            details: Additional error details
        """
        self.message = message
        self.enterprise_id = enterprise_id
        self.details = details or {}
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        if self.enterprise_id:
            return f"[{self.enterprise_id}] {self.message}"
        return self.message

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for logging."""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "enterprise_id": self.enterprise_id,
            "details": self.details,
        }


class EnterpriseNotFoundError(NfsScoringError):
    """Raised when an enterprise id does not match a known enterprise."""

    def __init__(self, enterprise_id: str) -> None:
        super().__init__(
            f"Enterprise {enterprise_id} not found",
            enterprise_id=enterprise_id,
        )


class CalculationNotFoundError(NfsScoringError):
    """Raised when a stored calculation cannot be found."""

    def __init__(self, calculation_id: str) -> None:
        super().__init__(
            "NFS calculation not found",
            details={"calculation_id": calculation_id},
        )
        self.calculation_id = calculation_id


class InvalidRequestError(NfsScoringError):
    """Raised when a scoring payload fails validation."""

    pass


class ConfigurationError(NfsScoringError):
    """Raised when scoring configuration is invalid."""

    pass
