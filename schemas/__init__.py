from .void import (
     VoidSaleRequest,
     VoidPaymentRequest,
     RefundRequest,
     VoidedSaleItemResponse,
     VoidedSaleResponse,
     VoidedSaleListResponse,
)

__all__ = [
     "VoidSaleRequest",
     "VoidPaymentRequest",
     "RefundRequest",
     "VoidedSaleItemResponse",
     "VoidedSaleResponse",
     "VoidedSaleListResponse",
]
