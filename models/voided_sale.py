"""
VoidedSale model - immutable audit snapshot of a reversed transaction.

One row is written per void (cash sale, invoice sale or invoice payment),
carrying the totals as they stood before the reversal and the lines that
were reversed. Rows are append-only; refunds are recorded in their own
table rather than by updating the snapshot.
"""
from sqlalchemy import Column, Integer, String, Numeric, DateTime, Text, ForeignKey, Enum, func
from sqlalchemy.orm import relationship
from .base import Base, LineItemMixin, VoidMetadataMixin
from .enums import InvoiceStatus, VoidSource


class VoidedSale(VoidMetadataMixin, Base):
     """Historical snapshot of a voided sale, invoice or payment."""
     __tablename__ = "voided_sales"

     id = Column(Integer, primary_key=True, autoincrement=True)
     trans_date = Column(DateTime, nullable=True)
     customer_id = Column(Integer, nullable=False, index=True)
     receipt_no = Column(String(50), nullable=True, index=True)
     invoice_no = Column(String(50), nullable=True, index=True)

     total_due = Column(Numeric(15, 2), default=0, nullable=False)
     total_paid = Column(Numeric(15, 2), default=0, nullable=False)
     balance_due = Column(Numeric(15, 2), default=0, nullable=False)
     paid_for_invoice = Column(Numeric(15, 2), default=0, nullable=False)
     status = Column(Enum(InvoiceStatus, name="voided_sale_status"), nullable=True)
     void_source = Column(
          Enum(VoidSource, name="void_source", create_constraint=True),
          nullable=False,
          index=True
     )
     currency_id = Column(String(10), nullable=True)
     reasons = Column(Text, nullable=True)

     user_id = Column(Integer, nullable=True)
     created_at = Column(DateTime, server_default=func.now(), nullable=False, index=True)

     items = relationship(
          "VoidedSaleItem",
          back_populates="voided_sale",
          order_by="VoidedSaleItem.id",
          cascade="all, delete-orphan"
     )
     refunds = relationship("Refund", back_populates="voided_sale", order_by="Refund.id")

     def __repr__(self):
          return f"<VoidedSale(id={self.id}, void_no='{self.void_no}', source='{self.void_source.value}')>"


class VoidedSaleItem(LineItemMixin, Base):
     __tablename__ = "voided_sale_items"

     voided_sale_id = Column(
          Integer,
          ForeignKey("voided_sales.id", ondelete="RESTRICT"),
          nullable=False,
          index=True
     )

     voided_sale = relationship("VoidedSale", back_populates="items")
