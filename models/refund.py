from sqlalchemy import Column, Integer, String, Numeric, DateTime, ForeignKey, Enum, func
from sqlalchemy.orm import relationship
from .base import Base, PeriodMixin
from .enums import PaymentSource


class Refund(PeriodMixin, Base):
     """
     Refund model - money handed back against a voided sale.

     Append-only. The refunded total of a voided sale is the sum of its
     refund rows.
     """
     __tablename__ = "refunds"

     id = Column(Integer, primary_key=True, autoincrement=True)
     trans_date = Column(DateTime, nullable=False)
     refund_no = Column(String(50), unique=True, nullable=False, index=True)
     customer_id = Column(Integer, nullable=False, index=True)
     voided_sale_id = Column(
          Integer,
          ForeignKey("voided_sales.id", ondelete="RESTRICT"),
          nullable=False,
          index=True
     )
     refund_amount = Column(Numeric(15, 2), nullable=False)
     payment_method_id = Column(Integer, nullable=False)
     remarks = Column(String(255), nullable=True)
     user_id = Column(Integer, nullable=True)
     created_at = Column(DateTime, server_default=func.now(), nullable=False)

     voided_sale = relationship("VoidedSale", back_populates="refunds")

     def __repr__(self):
          return f"<Refund(id={self.id}, refund_no='{self.refund_no}', amount={self.refund_amount})>"


class Collection(PeriodMixin, Base):
     """Cash-flow row; refunds are written as negative amounts."""
     __tablename__ = "collections"

     id = Column(Integer, primary_key=True, autoincrement=True)
     trans_date = Column(DateTime, nullable=False)
     receipt_no = Column(String(50), nullable=False, index=True)
     payment_source = Column(Enum(PaymentSource, name="payment_source"), nullable=False)
     customer_id = Column(Integer, nullable=False, index=True)
     payment_method_id = Column(Integer, nullable=False)
     amount = Column(Numeric(15, 2), nullable=False)
     user_id = Column(Integer, nullable=True)
     created_at = Column(DateTime, server_default=func.now(), nullable=False)

     def __repr__(self):
          return f"<Collection(id={self.id}, receipt_no='{self.receipt_no}', amount={self.amount})>"
