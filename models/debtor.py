from sqlalchemy import Column, Integer, String, Numeric, DateTime, ForeignKey, func
from sqlalchemy.orm import relationship
from .base import Base, PeriodMixin


class Debtor(Base):
     """
     Debtor model - a customer's running owed balance.

     Balance moves only together with a DebtorLog row describing the movement.
     """
     __tablename__ = "debtors"

     id = Column(Integer, primary_key=True, autoincrement=True)
     customer_id = Column(Integer, unique=True, nullable=False, index=True)
     debtor_type = Column(String(50), default="Individual", nullable=True)
     balance = Column(Numeric(15, 2), default=0, nullable=False)
     user_id = Column(Integer, nullable=True)
     created_at = Column(DateTime, server_default=func.now(), nullable=False)

     logs = relationship("DebtorLog", back_populates="debtor", order_by="DebtorLog.id")

     def __repr__(self):
          return f"<Debtor(id={self.id}, customer_id={self.customer_id}, balance={self.balance})>"


class DebtorLog(PeriodMixin, Base):
     """Append-only debtor ledger row, one per balance movement."""
     __tablename__ = "debtor_logs"

     id = Column(Integer, primary_key=True, autoincrement=True)
     trans_date = Column(DateTime, nullable=True)
     debtor_id = Column(
          Integer,
          ForeignKey("debtors.id", ondelete="RESTRICT"),  # Prevent delete while ledger exists
          nullable=False,
          index=True
     )
     reference = Column(String(50), unique=True, nullable=False, index=True)
     debit_amount = Column(Numeric(15, 2), default=0, nullable=False)
     credit_amount = Column(Numeric(15, 2), default=0, nullable=False)
     debtor_type = Column(String(50), nullable=True)
     description = Column(String(255), nullable=True)
     user_id = Column(Integer, nullable=True)
     created_at = Column(DateTime, server_default=func.now(), nullable=False)

     debtor = relationship("Debtor", back_populates="logs")

     def __repr__(self):
          return f"<DebtorLog(id={self.id}, reference='{self.reference}', debit={self.debit_amount}, credit={self.credit_amount})>"
