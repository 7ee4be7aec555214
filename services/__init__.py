from .context import VoidContext
from .void_service import VoidService
from .reference_service import generate_unique_number, VOID_PREFIX, REFUND_PREFIX
from .refund_service import refund_voided_sale, refunded_amount, refundable_amount, is_refunded
from .history_service import list_voided_sales, get_voided_sale

__all__ = [
     "VoidContext",
     "VoidService",
     "generate_unique_number",
     "VOID_PREFIX",
     "REFUND_PREFIX",
     "refund_voided_sale",
     "refunded_amount",
     "refundable_amount",
     "is_refunded",
     "list_voided_sales",
     "get_voided_sale",
]
