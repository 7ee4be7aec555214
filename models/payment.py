from sqlalchemy import Column, Integer, String, Numeric, DateTime, ForeignKey, func
from .base import Base, VoidMetadataMixin


class InvoicePayment(VoidMetadataMixin, Base):
     """
     InvoicePayment model - one customer payment event against credit sales.

     How the payment is spread over invoices lives in InvoicePaymentDetail,
     linked by receipt_no.
     """
     __tablename__ = "invoice_payments"

     id = Column(Integer, primary_key=True, autoincrement=True)
     trans_date = Column(DateTime, nullable=True)
     receipt_no = Column(String(50), unique=True, nullable=False, index=True)
     customer_id = Column(Integer, nullable=False, index=True)
     total_due = Column(Numeric(15, 2), default=0, nullable=False)
     total_paid = Column(Numeric(15, 2), default=0, nullable=False)
     currency_id = Column(String(10), nullable=True)

     user_id = Column(Integer, nullable=True)
     created_at = Column(DateTime, server_default=func.now(), nullable=False)

     def __repr__(self):
          return f"<InvoicePayment(id={self.id}, receipt_no='{self.receipt_no}', total_paid={self.total_paid}, voided={self.voided})>"


class InvoicePaymentDetail(Base):
     """Portion of one payment allocated to one invoice."""
     __tablename__ = "invoice_payment_details"

     id = Column(Integer, primary_key=True, autoincrement=True)
     receipt_no = Column(String(50), ForeignKey("invoice_payments.receipt_no"), nullable=False, index=True)
     invoice_no = Column(String(50), ForeignKey("invoices.invoice_no"), nullable=False, index=True)
     total_due = Column(Numeric(15, 2), default=0, nullable=False)
     allocated_amount = Column(Numeric(15, 2), default=0, nullable=False)
     created_at = Column(DateTime, server_default=func.now(), nullable=False)

     def __repr__(self):
          return f"<InvoicePaymentDetail(receipt_no='{self.receipt_no}', invoice_no='{self.invoice_no}', amount={self.allocated_amount})>"
