import re

from marshmallow import ValidationError, validate

from utils.errors import ValidationFailed

# ASCII digits only, whole string (no trailing newline)
PHONE_ID = re.compile(r"[0-9]{7,15}")
PASSWORD_MIN = 4
PASSWORD_MAX = 10
# list_size / page ceiling; keeps LIMIT and OFFSET inside a 64-bit integer
MAX_PAGE_PARAM = 1_000_000

_is_email = validate.Email()


def validate_user_id(value) -> None:
    """
    A user id is a phone number (7 to 15 digits, nothing else) or an email.
    """
    if not value:
        raise ValidationError('"id" param is required')
    if not isinstance(value, str):
        raise ValidationError("id expected as phone number or email")
    if PHONE_ID.fullmatch(value):
        return
    try:
        _is_email(value)
    except ValidationError:
        raise ValidationError("id expected as phone number or email")


def validate_user_password(value) -> None:
    """Trimmed length must be within 4..10 characters."""
    trimmed = value.strip() if isinstance(value, str) else ""
    if not PASSWORD_MIN <= len(trimmed) <= PASSWORD_MAX:
        raise ValidationError(
            f"password expected as string between {PASSWORD_MIN} and {PASSWORD_MAX} characters long"
        )


def parse_file_id(raw):
    """
    Path ids must be numeric. Integral values come back as int, anything
    else numeric as float (it simply won't match a row).
    """
    if raw is None or str(raw).strip() == "":
        raise ValidationFailed('"id" param is required')
    try:
        number = float(raw)
    except (TypeError, ValueError):
        raise ValidationFailed("expected id of number type")
    if number != number or number in (float("inf"), float("-inf")):
        raise ValidationFailed("expected id of number type")
    return int(number) if number.is_integer() else number


def coerce_page_param(raw, default: int, maximum: int = MAX_PAGE_PARAM) -> int:
    """
    Permissive numeric cast used by the file list:
    absent/empty -> default, non numeric -> 0, negatives clamp to 0,
    huge values clamp to `maximum`.
    """
    if raw is None or raw == "":
        return default
    try:
        value = int(float(raw))
    except (TypeError, ValueError, OverflowError):
        return 0
    return min(max(value, 0), maximum)
