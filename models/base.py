from sqlalchemy import Boolean, Column, DateTime, Integer, Numeric, String
from sqlalchemy.orm import DeclarativeBase, declared_attr


class Base(DeclarativeBase):
     """
     Base class for all SQLAlchemy models.
     Provides common configuration and mixins.
     """

     @declared_attr.directive
     def __tablename__(cls) -> str:
          """
          Automatically generate table name from class name.
          Example: VoidedSale -> voided_sales
          """
          import re
          name = re.sub(r'(?<!^)(?=[A-Z])', '_', cls.__name__).lower()
          # Pluralize (simple version)
          if name.endswith('y'):
               return name[:-1] + 'ies'
          elif name.endswith('s'):
               return name + 'es'
          return name + 's'


class PeriodMixin:
     """Year/month partition and transaction-type code stamped on billing rows."""

     year_part = Column(Integer, default=0, nullable=False)
     month_part = Column(Integer, default=0, nullable=False)
     trans_type = Column(Integer, default=0, nullable=False)


class VoidMetadataMixin(PeriodMixin):
     """
     Void metadata block shared by sales, receipts, invoices and payments.

     The block is always written as a whole by ``mark_voided``.
     """

     voided = Column(Boolean, default=False, nullable=False, index=True)
     void_no = Column(String(50), nullable=True, index=True)
     void_sys_date = Column(DateTime, nullable=True)
     void_trans_date = Column(DateTime, nullable=True)
     void_user_id = Column(Integer, nullable=True)

     def mark_voided(self, void_no, trans_date, trans_type, ctx) -> None:
          """Stamp the complete void block in one assignment pass."""
          self.voided = True
          self.void_no = void_no
          self.void_sys_date = ctx.now
          self.void_trans_date = trans_date
          self.void_user_id = ctx.actor_id
          self.year_part = trans_date.year
          self.month_part = trans_date.month
          self.trans_type = int(trans_type)


class LineItemMixin:
     """Product line: item reference, quantity and unit price."""

     id = Column(Integer, primary_key=True, autoincrement=True)
     item_id = Column(Integer, nullable=False, index=True)
     quantity = Column(Numeric(12, 2), nullable=False)
     price = Column(Numeric(12, 2), nullable=False, default=0)

     def __repr__(self):
          return f"<{self.__class__.__name__}(item_id={self.item_id}, quantity={self.quantity}, price={self.price})>"
