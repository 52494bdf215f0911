"""Inquiry entity — a customer request for a manufacturing quote."""

from dataclasses import dataclass
from datetime import datetime

from inquiry_router.domain.value_objects.enums import InquiryStatus


@dataclass
class Inquiry:
    id: str
    product_category: str
    inquiry_no: str | None = None
    customer_name: str | None = None
    product_name: str | None = None
    status: InquiryStatus = InquiryStatus.PENDING
    assigned_engineer_id: str | None = None
    assigned_at: datetime | None = None
    version: int = 0

    def is_assigned(self) -> bool:
        return self.assigned_engineer_id is not None
