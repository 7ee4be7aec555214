from decimal import Decimal

from sqlalchemy import Column, Integer, String, Numeric, DateTime, ForeignKey, Enum, func
from sqlalchemy.orm import relationship
from .base import Base, LineItemMixin, PeriodMixin, VoidMetadataMixin
from .enums import InvoiceStatus


class Invoice(VoidMetadataMixin, Base):
     """
     Invoice model - credit-sale record owed by a customer.

     balance_due is kept equal to total_due - total_paid by every mutation
     in the void engine.
     """
     __tablename__ = "invoices"

     id = Column(Integer, primary_key=True, autoincrement=True)
     trans_date = Column(DateTime, nullable=True)
     invoice_no = Column(String(50), unique=True, nullable=False, index=True)
     customer_id = Column(Integer, nullable=False, index=True)

     # Amounts
     total_due = Column(Numeric(15, 2), default=0, nullable=False)
     total_paid = Column(Numeric(15, 2), default=0, nullable=False)
     balance_due = Column(Numeric(15, 2), default=0, nullable=False)
     paid_for_invoice = Column(Numeric(15, 2), default=0, nullable=False)
     status = Column(
          Enum(InvoiceStatus, name="invoice_status", create_constraint=True),
          default=InvoiceStatus.OPEN,
          nullable=False,
          index=True
     )
     currency_id = Column(String(10), nullable=True)

     user_id = Column(Integer, nullable=True)
     created_at = Column(DateTime, server_default=func.now(), nullable=False)

     # Relationships
     items = relationship(
          "InvoiceItem",
          back_populates="invoice",
          order_by="InvoiceItem.id",
          cascade="all, delete-orphan"
     )

     def __repr__(self):
          return f"<Invoice(id={self.id}, invoice_no='{self.invoice_no}', status='{self.status.value}', balance_due={self.balance_due})>"

     def reverse_allocation(self, amount: Decimal) -> None:
          """
          Give back a payment allocation that no longer exists.

          A Closed invoice reopens, since the payment that settled it is gone.
          """
          self.balance_due = self.balance_due + amount
          self.total_paid = self.total_paid - amount
          if self.status == InvoiceStatus.CLOSED:
               self.status = InvoiceStatus.OPEN

     def cancel(self) -> None:
          """Move the invoice to its terminal state."""
          self.status = InvoiceStatus.CANCELLED


class InvoiceItem(LineItemMixin, Base):
     __tablename__ = "invoice_items"

     invoice_id = Column(Integer, ForeignKey("invoices.id", ondelete="CASCADE"), nullable=False, index=True)

     invoice = relationship("Invoice", back_populates="items")


class InvoiceLog(PeriodMixin, Base):
     """Append-only movement on one invoice. Never updated once written."""
     __tablename__ = "invoice_logs"

     id = Column(Integer, primary_key=True, autoincrement=True)
     trans_date = Column(DateTime, nullable=True)
     reference = Column(String(50), nullable=False, index=True)
     invoice_no = Column(String(50), ForeignKey("invoices.invoice_no"), nullable=False, index=True)
     customer_id = Column(Integer, nullable=False, index=True)
     debit_amount = Column(Numeric(15, 2), default=0, nullable=False)
     credit_amount = Column(Numeric(15, 2), default=0, nullable=False)
     description = Column(String(255), nullable=True)
     user_id = Column(Integer, nullable=True)
     created_at = Column(DateTime, server_default=func.now(), nullable=False)

     def __repr__(self):
          return f"<InvoiceLog(id={self.id}, invoice_no='{self.invoice_no}', debit={self.debit_amount}, credit={self.credit_amount})>"
