"""
Domain exceptions for the billing void engine.

Every error carries a machine-readable code and details so the calling
layer can turn it into a response without parsing messages.
"""
from decimal import Decimal
from typing import Any, Optional


class BillingError(Exception):
     """Base exception for all billing errors."""

     def __init__(
          self,
          message: str,
          code: Optional[str] = None,
          details: Optional[dict[str, Any]] = None,
     ):
          super().__init__(message)
          self.message = message
          self.code = code or self.__class__.__name__
          self.details = details or {}

     def to_dict(self) -> dict:
          """Convert to dictionary for API responses."""
          return {
               "error": self.code,
               "message": self.message,
               "details": self.details,
          }


class RecordNotFoundError(BillingError):
     """Target receipt, invoice, payment or voided sale does not exist."""

     def __init__(self, entity: str, reference: Any):
          super().__init__(
               f"{entity} not found: {reference}",
               code="RECORD_NOT_FOUND",
               details={"entity": entity, "reference": str(reference)},
          )


class AlreadyVoidedError(BillingError):
     """A record handed to a void operation is already voided."""

     def __init__(self, entity: str, reference: Any):
          super().__init__(
               f"{entity} has already been voided: {reference}",
               code="ALREADY_VOIDED",
               details={"entity": entity, "reference": str(reference)},
          )


class TransactionRequiredError(BillingError):
     """A cascaded step was invoked without an open transaction."""

     def __init__(self, operation: str):
          super().__init__(
               f"{operation} must run inside an open transaction",
               code="TRANSACTION_REQUIRED",
               details={"operation": operation},
          )


class ReferenceGenerationError(BillingError):
     """No free reference number was found within the retry budget."""

     def __init__(self, prefix: str, attempts: int):
          super().__init__(
               f"Could not generate a unique '{prefix}' reference after {attempts} attempts",
               code="REFERENCE_GENERATION_FAILED",
               details={"prefix": prefix, "attempts": attempts},
          )


class RefundLimitExceededError(BillingError):
     """Requested refund exceeds what is still refundable."""

     def __init__(self, requested: Decimal, refundable: Decimal):
          super().__init__(
               f"Refund of {requested} exceeds refundable balance {refundable}",
               code="REFUND_LIMIT_EXCEEDED",
               details={"requested": str(requested), "refundable": str(refundable)},
          )
