import enum


class InvoiceStatus(str, enum.Enum):
     """Lifecycle of a credit-sale invoice. CANCELLED is terminal."""
     OPEN = "OPEN"
     CLOSED = "CLOSED"
     CANCELLED = "CANCELLED"


class VoidSource(str, enum.Enum):
     """Kind of transaction a VoidedSale snapshot was taken from."""
     CASH_SALE = "CASH_SALE"
     INVOICE_SALE = "INVOICE_SALE"
     INVOICE_PAYMENT = "INVOICE_PAYMENT"


class PaymentSource(str, enum.Enum):
     """Origin of money recorded in the collections table."""
     CASH_SALE = "CASH_SALE"
     INVOICE_PAYMENT = "INVOICE_PAYMENT"


class BillingTransType(enum.IntEnum):
     """Transaction-type codes stored in the ``trans_type`` columns."""
     CASH = 1
     INVOICE = 2
     REFUND = 3
     PAYMENT = 4
     PAYMENT_CANCELLATION = 5
     SALE_CANCELLATION = 6
     CREDIT_NOTE = 7
     CREDIT_NOTE_CANCELLATION = 8
     DEPOSIT = 9
     SALES = 10
