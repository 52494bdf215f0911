"""Assignment history entity — the audit record of routing an inquiry."""

from dataclasses import dataclass
from datetime import datetime

from inquiry_router.domain.value_objects.enums import AssignmentType


@dataclass
class AssignmentHistory:
    id: str | None
    inquiry_id: str
    assigned_to: str
    assignment_type: AssignmentType
    assignment_reason: str
    assigned_from: str | None = None
    assigned_by: str | None = None
    rule_id: str | None = None
    assigned_at: datetime | None = None
