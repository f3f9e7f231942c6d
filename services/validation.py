from datetime import date, datetime, time

from services.errors import ValidationError


def parse_date(value, field: str = "date") -> date:
    # Expect ISO format like "2025-03-01"
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"{field} is required")
    try:
        return date.fromisoformat(value.strip())
    except ValueError:
        raise ValidationError(f"Invalid {field}. Use YYYY-MM-DD") from None


def parse_time(value, field: str) -> time:
    # Expect wall-clock "HH:MM" (seconds allowed), no timezone
    if isinstance(value, time):
        return value
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"{field} is required")
    try:
        parsed = time.fromisoformat(value.strip())
    except ValueError:
        raise ValidationError(f"Invalid {field}. Use HH:MM") from None
    if parsed.tzinfo is not None:
        raise ValidationError(f"{field} must not carry a timezone")
    return parsed


def parse_time_range(start_value, end_value):
    start = parse_time(start_value, "start_time")
    end = parse_time(end_value, "end_time")
    if end <= start:
        raise ValidationError("end_time must be after start_time")
    return start, end


def require_id(value, field: str) -> int:
    if isinstance(value, bool) or value is None or value == "":
        raise ValidationError(f"{field} is required")
    try:
        parsed = int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"Invalid {field}") from None
    if parsed <= 0:
        raise ValidationError(f"Invalid {field}")
    return parsed


def require_int(value, field: str, minimum: int = 0) -> int:
    if isinstance(value, bool) or value is None:
        raise ValidationError(f"{field} is required")
    if isinstance(value, float) and not value.is_integer():
        raise ValidationError(f"{field} must be a whole number")
    try:
        parsed = int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field} must be a number") from None
    if parsed < minimum:
        raise ValidationError(f"{field} must be at least {minimum}")
    return parsed


def require_text(value, field: str, max_length: int = 255) -> str:
    text = (value or "").strip() if isinstance(value, str) or value is None else None
    if not text:
        raise ValidationError(f"{field} is required")
    if len(text) > max_length:
        raise ValidationError(f"{field} is too long")
    return text


def overlaps(start_a: time, end_a: time, start_b: time, end_b: time) -> bool:
    return start_a < end_b and start_b < end_a
