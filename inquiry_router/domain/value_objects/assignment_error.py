"""AssignmentError value object — a typed, non-fatal assignment refusal."""

from dataclasses import dataclass

from inquiry_router.domain.value_objects.enums import AssignmentErrorCode


@dataclass(frozen=True)
class AssignmentError:
    code: AssignmentErrorCode
    message: str

    def __str__(self) -> str:
        return f"{self.code.value}: {self.message}"
