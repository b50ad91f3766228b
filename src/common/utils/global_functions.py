# common/utils/global_functions.py
from datetime import date
from typing import Any, Optional, Tuple

from src.common.utils.exceptions import ValidationError
from src.common.utils.global_messages import GlobalMessages


def blank_to_none(value: Any) -> Any:
    """Forms post empty strings for untouched optional inputs."""
    if isinstance(value, str) and not value.strip():
        return None
    return value


def require_date_range(start_date: Optional[date], end_date: Optional[date]) -> Tuple[date, date]:
    """Both ends of a statistics period are mandatory and must be ordered."""
    missing = [
        {"field": name, "message": "Campo requerido"}
        for name, value in (("startDate", start_date), ("endDate", end_date))
        if value is None
    ]
    if missing:
        raise ValidationError(GlobalMessages.DATE_RANGE_REQUIRED, details=missing)
    if start_date > end_date:
        raise ValidationError(GlobalMessages.INVALID_DATE_RANGE)
    return start_date, end_date


def round_money(value: float) -> float:
    return round(float(value or 0), 2)
