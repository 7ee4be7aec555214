"""
Refund Service - money handed back against a voided sale.

The VoidedSale snapshot is never updated. Each refund is its own Refund
row plus a negative Collection row for the cash flow, and the refunded
state of a snapshot is derived from those rows.
"""
from decimal import Decimal

from sqlalchemy import func
from sqlalchemy.orm import Session

from database import unit_of_work
from logging_config import get_logger
from models import BillingTransType, Collection, PaymentSource, Refund, VoidedSale, VoidSource
from schemas.void import RefundRequest
from services.context import VoidContext
from services.exceptions import RecordNotFoundError, RefundLimitExceededError
from services.reference_service import REFUND_PREFIX, generate_unique_number

log = get_logger(__name__)


def _payment_source_for(void_source: VoidSource) -> PaymentSource:
     """Money for a cash sale came in as a cash sale; everything else as an invoice payment."""
     if void_source == VoidSource.CASH_SALE:
          return PaymentSource.CASH_SALE
     return PaymentSource.INVOICE_PAYMENT


def refunded_amount(db: Session, voided_sale: VoidedSale) -> Decimal:
     """Sum of every refund recorded against a voided sale."""
     total = (
          db.query(func.coalesce(func.sum(Refund.refund_amount), 0))
          .filter(Refund.voided_sale_id == voided_sale.id)
          .scalar()
     )
     return Decimal(str(total))


def refundable_amount(db: Session, voided_sale: VoidedSale) -> Decimal:
     """What may still be refunded: the amount paid minus earlier refunds."""
     return Decimal(str(voided_sale.total_paid)) - refunded_amount(db, voided_sale)


def is_refunded(db: Session, voided_sale: VoidedSale) -> bool:
     return refunded_amount(db, voided_sale) >= voided_sale.total_paid


def refund_voided_sale(
     db: Session,
     voided_sale_id: int,
     request: RefundRequest,
     ctx: VoidContext
) -> Refund:
     """
     Record a refund against a voided sale.

     Args:
          db: SQLAlchemy database session
          voided_sale_id: ID of the VoidedSale being refunded
          request: Validated refund payload
          ctx: Acting user and clock

     Returns:
          Created Refund object

     Raises:
          RecordNotFoundError: If the voided sale does not exist
          RefundLimitExceededError: If the amount exceeds the refundable balance
     """
     voided_sale = db.query(VoidedSale).filter(VoidedSale.id == voided_sale_id).first()
     if voided_sale is None:
          raise RecordNotFoundError("VoidedSale", voided_sale_id)

     with unit_of_work(db):
          # Concurrent refunds of one snapshot queue on its row
          voided_sale = (
               db.query(VoidedSale)
               .filter(VoidedSale.id == voided_sale_id)
               .with_for_update()
               .populate_existing()
               .one()
          )
          remaining = refundable_amount(db, voided_sale)
          if request.refund_amount > remaining:
               raise RefundLimitExceededError(request.refund_amount, remaining)

          trans_date = request.trans_date
          refund_no = generate_unique_number(db, Refund.refund_no, REFUND_PREFIX, now=ctx.now)
          period = {
               "year_part": trans_date.year,
               "month_part": trans_date.month,
               "trans_type": int(BillingTransType.REFUND),
          }

          refund = Refund(
               trans_date=trans_date,
               refund_no=refund_no,
               customer_id=voided_sale.customer_id,
               voided_sale_id=voided_sale.id,
               refund_amount=request.refund_amount,
               payment_method_id=request.payment_method_id,
               remarks=request.remarks,
               user_id=ctx.actor_id,
               **period,
          )
          db.add(refund)
          db.add(Collection(
               trans_date=trans_date,
               receipt_no=refund_no,
               payment_source=_payment_source_for(voided_sale.void_source),
               customer_id=voided_sale.customer_id,
               payment_method_id=request.payment_method_id,
               amount=-request.refund_amount,
               user_id=ctx.actor_id,
               **period,
          ))
          db.flush()

     log.info(
          "voided_sale_refunded",
          voided_sale_id=voided_sale.id,
          refund_no=refund_no,
          amount=str(request.refund_amount),
     )
     return refund
