"""
Pydantic schemas for void and refund requests and void-history responses.
"""
from datetime import datetime
from decimal import Decimal
from typing import Optional, List
from pydantic import BaseModel, Field, ConfigDict

from models.enums import VoidSource


class VoidSaleRequest(BaseModel):
     """Schema for voiding a sale (cash or credit)."""
     remarks: str = Field(..., min_length=5, max_length=255, description="Reason stored on the void snapshot")
     trans_date: Optional[datetime] = Field(None, description="Effective date; defaults to now")

     model_config = ConfigDict(
          json_schema_extra={
               "example": {
                    "remarks": "Customer returned all goods",
                    "trans_date": "2026-02-01T09:00:00"
               }
          }
     )


class VoidPaymentRequest(VoidSaleRequest):
     """Schema for voiding a single invoice payment."""


class RefundRequest(BaseModel):
     """Schema for refunding money against a voided sale."""
     trans_date: datetime = Field(..., description="Effective date of the refund")
     refund_amount: Decimal = Field(..., gt=0, max_digits=15, decimal_places=2, description="Amount handed back")
     payment_method_id: int = Field(..., gt=0, description="Payment type used for the refund")
     remarks: Optional[str] = Field(None, max_length=255)

     model_config = ConfigDict(
          json_schema_extra={
               "example": {
                    "trans_date": "2026-02-02T10:00:00",
                    "refund_amount": 40.00,
                    "payment_method_id": 1,
                    "remarks": "Cash returned at counter"
               }
          }
     )


class VoidedSaleItemResponse(BaseModel):
     """Snapshot line of a voided sale."""
     item_id: int
     quantity: Decimal
     price: Decimal

     model_config = ConfigDict(from_attributes=True)


class VoidedSaleResponse(BaseModel):
     """Schema for a voided sale snapshot."""
     id: int
     void_no: str
     void_source: VoidSource
     customer_id: int
     receipt_no: Optional[str] = None
     invoice_no: Optional[str] = None
     total_due: Decimal
     total_paid: Decimal
     balance_due: Decimal
     reasons: Optional[str] = None
     void_trans_date: Optional[datetime] = None
     void_user_id: Optional[int] = None
     created_at: datetime
     items: List[VoidedSaleItemResponse] = []

     model_config = ConfigDict(from_attributes=True)


class VoidedSaleListResponse(BaseModel):
     """Schema for paginated void-history response."""
     voided_sales: List[VoidedSaleResponse]
     total: int
     page: int = 1
     page_size: int = 10
