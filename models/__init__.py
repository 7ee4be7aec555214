from .base import Base
from .enums import BillingTransType, InvoiceStatus, PaymentSource, VoidSource
from .sale import Sale, SaleItem
from .receipt import Receipt, ReceiptItem
from .invoice import Invoice, InvoiceItem, InvoiceLog
from .payment import InvoicePayment, InvoicePaymentDetail
from .debtor import Debtor, DebtorLog
from .voided_sale import VoidedSale, VoidedSaleItem
from .refund import Refund, Collection

__all__ = [
     "Base",
     "BillingTransType",
     "InvoiceStatus",
     "PaymentSource",
     "VoidSource",
     "Sale",
     "SaleItem",
     "Receipt",
     "ReceiptItem",
     "Invoice",
     "InvoiceItem",
     "InvoiceLog",
     "InvoicePayment",
     "InvoicePaymentDetail",
     "Debtor",
     "DebtorLog",
     "VoidedSale",
     "VoidedSaleItem",
     "Refund",
     "Collection",
]
