from sqlalchemy import Column, Integer, String, Numeric, DateTime, ForeignKey, func
from sqlalchemy.orm import relationship
from .base import Base, LineItemMixin, VoidMetadataMixin


class Sale(VoidMetadataMixin, Base):
     """
     Sale model - one completed point-of-sale transaction.

     A cash sale carries a receipt number only; a credit sale also carries
     the invoice number it was billed under.
     """
     __tablename__ = "sales"

     id = Column(Integer, primary_key=True, autoincrement=True)
     trans_date = Column(DateTime, nullable=True)
     receipt_no = Column(String(50), nullable=True, index=True)
     invoice_no = Column(String(50), nullable=True, index=True)
     customer_id = Column(Integer, nullable=False, index=True)

     # Totals
     total_due = Column(Numeric(15, 2), default=0, nullable=False)
     discount = Column(Numeric(15, 2), default=0, nullable=False)
     total_paid = Column(Numeric(15, 2), default=0, nullable=False)
     change_amount = Column(Numeric(15, 2), default=0, nullable=False)

     user_id = Column(Integer, nullable=True)
     created_at = Column(DateTime, server_default=func.now(), nullable=False)

     # Relationships
     items = relationship(
          "SaleItem",
          back_populates="sale",
          order_by="SaleItem.id",
          cascade="all, delete-orphan"
     )

     def __repr__(self):
          return f"<Sale(id={self.id}, receipt_no='{self.receipt_no}', invoice_no='{self.invoice_no}', voided={self.voided})>"


class SaleItem(LineItemMixin, Base):
     __tablename__ = "sale_items"

     sale_id = Column(Integer, ForeignKey("sales.id", ondelete="CASCADE"), nullable=False, index=True)

     sale = relationship("Sale", back_populates="items")
