"""Advisory compliance warnings over a schedule."""

import datetime as dt

from shift_engine.domain.shared.base import ValueObject

from ..value_objects.enums import ComplianceWarningKind


class ComplianceWarning(ValueObject):
    """A non-blocking rule breach for one employee."""

    kind: ComplianceWarningKind
    employee_id: str
    message: str
    dates: tuple[dt.date, ...] = ()
    shift_ids: tuple[str, ...] = ()
    hours: float | None = None
