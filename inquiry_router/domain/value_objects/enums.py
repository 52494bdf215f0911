"""Domain enums — pure Python, no external dependencies."""

from enum import Enum


class RuleType(str, Enum):
    AUTO = "auto"
    ROTATION = "rotation"
    LOAD_BALANCE = "load_balance"
    SKILL_BASED = "skill_based"


class AssignmentType(str, Enum):
    AUTO = "auto"
    MANUAL = "manual"
    REASSIGN = "reassign"
    SELF_SELECT = "self_select"


class InquiryStatus(str, Enum):
    PENDING = "pending"
    ASSIGNED = "assigned"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


# Statuses counted as an engineer's current workload
IN_FLIGHT_STATUSES = frozenset({InquiryStatus.ASSIGNED, InquiryStatus.IN_PROGRESS})


class AssignmentErrorCode(str, Enum):
    NO_MATCH = "no_match"
    ALREADY_ASSIGNED = "already_assigned"
    INVALID_REASSIGNMENT = "invalid_reassignment"
    NO_ENGINEERS_AVAILABLE = "no_engineers_available"
    UNKNOWN_ENGINEER = "unknown_engineer"
    ENGINEER_NOT_QUALIFIED = "engineer_not_qualified"
    MAX_ASSIGNMENTS_REACHED = "max_assignments_reached"
    VERSION_CONFLICT = "version_conflict"
    INQUIRY_NOT_FOUND = "inquiry_not_found"
