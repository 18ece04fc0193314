"""Exception hierarchy for the compiled execution report."""

from __future__ import annotations

from collections.abc import Sequence


class ReportingError(Exception):
    """Base error for report building."""

    pass


class MalformedTreeError(ReportingError):
    """A facility payload could not be parsed into financial rows."""

    def __init__(self, facility: str | None, message: str):
        self.facility = facility
        self.message = message
        prefix = f"[{facility}] " if facility else ""
        super().__init__(f"{prefix}{message}")


class StructuralMismatchError(ReportingError):
    """A facility tree does not conform to the statement template."""

    def __init__(
        self,
        facility: str,
        unknown_ids: Sequence[str] = (),
        misplaced_ids: Sequence[str] = (),
    ):
        self.facility = facility
        self.unknown_ids = list(unknown_ids)
        self.misplaced_ids = list(misplaced_ids)
        parts = []
        if self.unknown_ids:
            parts.append(f"unknown ids: {', '.join(self.unknown_ids)}")
        if self.misplaced_ids:
            parts.append(f"misplaced ids: {', '.join(self.misplaced_ids)}")
        super().__init__(f"[{facility}] tree does not match template ({'; '.join(parts)})")


class DuplicateFacilityError(ReportingError):
    """The same facility name was supplied more than once."""

    def __init__(self, facility: str):
        self.facility = facility
        super().__init__(f"Facility '{facility}' supplied more than once")
