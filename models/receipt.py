from sqlalchemy import Column, Integer, String, Numeric, DateTime, ForeignKey, func
from sqlalchemy.orm import relationship
from .base import Base, LineItemMixin, VoidMetadataMixin


class Receipt(VoidMetadataMixin, Base):
     """
     Receipt model - cash-sale counterpart of a Sale.

     Carries its own void block, independent of the Sale it mirrors.
     """
     __tablename__ = "receipts"

     id = Column(Integer, primary_key=True, autoincrement=True)
     trans_date = Column(DateTime, nullable=True)
     receipt_no = Column(String(50), unique=True, nullable=False, index=True)
     customer_id = Column(Integer, nullable=False, index=True)

     total_due = Column(Numeric(15, 2), default=0, nullable=False)
     discount = Column(Numeric(15, 2), default=0, nullable=False)
     total_paid = Column(Numeric(15, 2), default=0, nullable=False)
     change_amount = Column(Numeric(15, 2), default=0, nullable=False)
     currency_id = Column(String(10), nullable=True)

     user_id = Column(Integer, nullable=True)
     created_at = Column(DateTime, server_default=func.now(), nullable=False)

     items = relationship(
          "ReceiptItem",
          back_populates="receipt",
          order_by="ReceiptItem.id",
          cascade="all, delete-orphan"
     )

     def __repr__(self):
          return f"<Receipt(id={self.id}, receipt_no='{self.receipt_no}', voided={self.voided})>"


class ReceiptItem(LineItemMixin, Base):
     __tablename__ = "receipt_items"

     receipt_id = Column(Integer, ForeignKey("receipts.id", ondelete="CASCADE"), nullable=False, index=True)

     receipt = relationship("Receipt", back_populates="items")
