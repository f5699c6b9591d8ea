"""
Per-type storage and display rules for custom field values.
"""

from datetime import date, datetime, time, timezone
from typing import Any, Optional

from resourcelibrary_backend.schemas.customfields import FieldDefinition, FieldType
from resourcelibrary_backend.settings import settings

FORM_PREFIX = "customfield_"
DATE_ONLY_DISPLAY_FORMAT = "%A, %d %B %Y"

# Column of customfield_data compared by filters, per field type
DATA_COLUMNS = {
    FieldType.TEXT: "charvalue",
    FieldType.CHECKBOX: "value",
    FieldType.DATE: "intvalue",
    FieldType.SELECT: "intvalue",
    FieldType.TEXTAREA: "value",
}

VALUE_COLUMNS = ("intvalue", "decvalue", "charvalue", "value", "valueformat")


def form_element_name(shortname: str) -> str:
    return f"{FORM_PREFIX}{shortname}"


def parse_timestamp(value: Any, end_of_day: bool = False) -> Optional[int]:
    """
    Convert a unix timestamp, ISO date/datetime string, date or datetime to a
    UTC unix timestamp. Returns None for anything else.

    With ``end_of_day`` a bare date maps to its last second instead of midnight.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, datetime):
        moment = value if value.tzinfo else value.replace(tzinfo=timezone.utc)
        return int(moment.timestamp())
    if isinstance(value, date):
        moment = datetime.combine(value, time.max if end_of_day else time.min, tzinfo=timezone.utc)
        return int(moment.timestamp())

    text = str(value).strip()
    if not text:
        return None
    if text.lstrip("-").isdigit():
        return int(text)
    try:
        if len(text) == 10:
            return parse_timestamp(date.fromisoformat(text), end_of_day=end_of_day)
        return parse_timestamp(datetime.fromisoformat(text))
    except ValueError:
        return None


def _is_checked(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() not in ("", "0", "false", "no", "off")
    return bool(value)


def to_storage(field: FieldDefinition, raw: Any) -> Optional[dict[str, Any]]:
    """
    Map a submitted value to customfield_data columns.

    Returns None when the value cannot be stored for this field type.
    """
    if field.type == FieldType.TEXT:
        text = "" if raw is None else str(raw)
        return {"charvalue": text, "value": text}

    if field.type == FieldType.CHECKBOX:
        checked = 1 if _is_checked(raw) else 0
        return {"intvalue": checked, "value": str(checked)}

    if field.type == FieldType.DATE:
        timestamp = parse_timestamp(raw)
        if timestamp is None:
            return None
        return {"intvalue": timestamp, "value": str(timestamp)}

    if field.type == FieldType.SELECT:
        try:
            index = int(raw)
        except (TypeError, ValueError):
            return None
        if index < 0 or index > len(field.get_options()):
            return None
        return {"intvalue": index, "value": str(index)}

    if field.type == FieldType.TEXTAREA:
        if isinstance(raw, dict):
            return {"value": str(raw.get("text", "")), "valueformat": int(raw.get("format", 0) or 0)}
        return {"value": "" if raw is None else str(raw), "valueformat": 0}

    return None


def display_value(field: FieldDefinition, data: Any) -> str:
    """Human readable value of a customfield_data row (or any object with its columns)."""
    if field.type == FieldType.CHECKBOX:
        return "Yes" if data.intvalue else "No"

    if field.type == FieldType.DATE:
        if not data.intvalue:
            return ""
        moment = datetime.fromtimestamp(data.intvalue, tz=timezone.utc)
        if field.get_configdata_property('includetime'):
            return moment.strftime(settings.DATE_DISPLAY_FORMAT)
        return moment.strftime(DATE_ONLY_DISPLAY_FORMAT)

    if field.type == FieldType.SELECT:
        options = field.get_options()
        if data.intvalue and 0 < data.intvalue <= len(options):
            return options[data.intvalue - 1]
        return ""

    if field.type == FieldType.TEXT:
        return data.charvalue if data.charvalue is not None else (data.value or "")

    return data.value or ""
