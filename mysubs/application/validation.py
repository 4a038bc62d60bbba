"""
Validation of subscription requests

Every rule is checked independently and all violations are reported in one
ValidationError ("field: message; field: message"), never just the first.
"""
import re

from mysubs.domain.errors import DecodeError, ValidationError
from mysubs.domain.year_month import YearMonth
from mysubs.schemas.subscription import CreateRequest, UpdateRequest

_HEX = "[0-9a-fA-F]"
_HYPHENATED = f"{_HEX}{{8}}-{_HEX}{{4}}-{_HEX}{{4}}-{_HEX}{{4}}-{_HEX}{{12}}"

# 8-4-4-4-12, {8-4-4-4-12}, urn:uuid:8-4-4-4-12 or 32 bare hex digits
_GUID_PATTERN = re.compile(
    rf"{_HYPHENATED}|\{{{_HYPHENATED}\}}|(?i:urn:uuid:){_HYPHENATED}|{_HEX}{{32}}",
    re.ASCII,
)


def validate_guid(value: str) -> str:
    """
    Check that value is a GUID

    Args:
        value: Identifier text

    Returns:
        The value unchanged

    Raises:
        DecodeError: value does not parse as a GUID

    Example:
        >>> validate_guid("bad-guid")
        DecodeError: must be a valid GUID: "bad-guid"
    """
    if not isinstance(value, str) or not _GUID_PATTERN.fullmatch(value):
        raise DecodeError(f'must be a valid GUID: "{value}"')
    return value


def _check_guid(field: str, value: str, errors: list[str]) -> None:
    try:
        validate_guid(value)
    except DecodeError as e:
        errors.append(f"{field}: {e}")


def _check_period(
    start: YearMonth,
    end: YearMonth,
    errors: list[str],
    start_field: str = "start_date",
    end_field: str = "end_date",
) -> None:
    if start.is_unset:
        errors.append(f"{start_field}: required (MM-YYYY)")
    if end.is_unset:
        errors.append(f"{end_field}: required (MM-YYYY)")
    if not start.is_unset and not end.is_unset and start > end:
        errors.append(f"date range: {start_field} must be <= {end_field}")


def _check_fields(req: CreateRequest, errors: list[str]) -> None:
    if not req.service_name.strip():
        errors.append("service_name: required")
    if req.price < 0:
        errors.append("price: must be >= 0")
    _check_guid("user_id", req.user_id, errors)
    _check_period(req.start_date, req.end_date, errors)


def _raise_if_any(errors: list[str]) -> None:
    if errors:
        raise ValidationError(errors)


def validate_create_request(req: CreateRequest) -> None:
    """Raises ValidationError listing every violated rule"""
    errors: list[str] = []
    _check_fields(req, errors)
    _raise_if_any(errors)


def validate_update_request(req: UpdateRequest, path_id: str | None = None) -> None:
    """
    Same rules as create plus the record id

    Args:
        req: Update payload (id taken from the body)
        path_id: Identifier from the URL, if any; must equal req.id

    Raises:
        ValidationError: listing every violated rule
    """
    errors: list[str] = []
    _check_guid("id", req.id, errors)
    if path_id is not None and req.id and req.id != path_id:
        errors.append("id: must match the path identifier")
    _check_fields(req, errors)
    _raise_if_any(errors)


def validate_total_cost_query(
    user_id: str,
    service_name: str,
    start: YearMonth,
    end: YearMonth,
) -> None:
    """Raises ValidationError listing every violated rule"""
    errors: list[str] = []
    if not user_id:
        errors.append("user_id: required")
    else:
        _check_guid("user_id", user_id, errors)
    if not service_name.strip():
        errors.append("service_name: required")
    _check_period(start, end, errors, start_field="from", end_field="to")
    _raise_if_any(errors)
