"""Typed outcomes returned by the allocation engine"""

from typing import Any, Dict, Iterable, Optional


class EngineError(Exception):
    """Base class for expected, caller-actionable engine outcomes"""

    kind = "EngineError"

    def __init__(self, message: str, **details: Any):
        super().__init__(message)
        self.message = message
        self.details: Dict[str, Any] = details

    def to_dict(self) -> Dict[str, Any]:
        return {"error": self.kind, "message": self.message, **self.details}


class ConflictError(EngineError):
    """A requested resource is already held"""

    kind = "Conflict"


class TableConflict(ConflictError):
    kind = "TableConflict"

    def __init__(self, conflicting_tables: Iterable[int]):
        tables = sorted(set(conflicting_tables))
        super().__init__(
            f"Tables {', '.join(str(t) for t in tables)} are already booked for this slot",
            conflicting_tables=tables,
        )


class OvenConflict(ConflictError):
    kind = "OvenConflict"

    def __init__(self):
        super().__init__("The oven is already booked for this slot")


class SlotBlocked(ConflictError):
    kind = "SlotBlocked"

    def __init__(self, reason: str, meal_period: str):
        super().__init__(
            f"This slot is blocked ({reason})",
            reason=reason,
            blocked_meal_period=meal_period,
        )


class BlockConflict(ConflictError):
    kind = "BlockConflict"

    def __init__(self, existing_reason: str, existing_meal_period: str):
        super().__init__(
            f"A block already exists for {existing_meal_period} on this date ({existing_reason})",
            existing_reason=existing_reason,
            existing_meal_period=existing_meal_period,
        )


class InvalidTransition(EngineError):
    kind = "InvalidTransition"

    def __init__(self, current_status: str, target_status: str):
        super().__init__(
            f"Cannot move a {current_status} booking to {target_status}",
            current_status=current_status,
            target_status=target_status,
        )


class AlreadyConfirmed(EngineError):
    kind = "AlreadyConfirmed"

    def __init__(self):
        super().__init__("Booking is already confirmed")


class PermissionDenied(EngineError):
    kind = "PermissionDenied"


class AttendeeCapExceeded(EngineError):
    kind = "AttendeeCapExceeded"

    def __init__(self, attendees: int, cap: int):
        super().__init__(
            f"{attendees} attendees exceed the limit of {cap} for the booked tables",
            attendees=attendees,
            cap=cap,
        )


class ValidationError(EngineError):
    kind = "ValidationError"

    def __init__(self, message: str, field: Optional[str] = None):
        if field is None:
            super().__init__(message)
        else:
            super().__init__(message, field=field)


class NotFound(EngineError):
    kind = "NotFound"
