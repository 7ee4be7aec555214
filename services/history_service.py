"""
Void history - read side over VoidedSale snapshots.
"""
from datetime import date, datetime, time
from typing import Optional

from sqlalchemy import or_
from sqlalchemy.orm import Session, selectinload

from models import VoidedSale
from schemas.void import VoidedSaleListResponse, VoidedSaleResponse
from services.exceptions import RecordNotFoundError


def list_voided_sales(
     db: Session,
     start_date: date,
     end_date: date,
     search: Optional[str] = None,
     page: int = 1,
     page_size: int = 10
) -> VoidedSaleListResponse:
     """
     Page through voided sales recorded between two days, newest first.

     Args:
          db: SQLAlchemy database session
          start_date: First day included
          end_date: Last day included
          search: Optional substring of the receipt or invoice number
          page: 1-based page number
          page_size: Rows per page

     Returns:
          VoidedSaleListResponse with the page and the total match count
     """
     query = db.query(VoidedSale).filter(
          VoidedSale.created_at >= datetime.combine(start_date, time.min),
          VoidedSale.created_at <= datetime.combine(end_date, time.max),
     )

     if search:
          term = f"%{search}%"
          query = query.filter(or_(VoidedSale.receipt_no.like(term), VoidedSale.invoice_no.like(term)))

     total = query.count()
     rows = (
          query.options(selectinload(VoidedSale.items))
          .order_by(VoidedSale.created_at.desc(), VoidedSale.id.desc())
          .offset((page - 1) * page_size)
          .limit(page_size)
          .all()
     )

     return VoidedSaleListResponse(
          voided_sales=[VoidedSaleResponse.model_validate(row) for row in rows],
          total=total,
          page=page,
          page_size=page_size,
     )


def get_voided_sale(db: Session, voided_sale_id: int) -> VoidedSale:
     """Load one snapshot with its lines, or raise RecordNotFoundError."""
     voided_sale = (
          db.query(VoidedSale)
          .options(selectinload(VoidedSale.items))
          .filter(VoidedSale.id == voided_sale_id)
          .first()
     )
     if voided_sale is None:
          raise RecordNotFoundError("VoidedSale", voided_sale_id)
     return voided_sale
