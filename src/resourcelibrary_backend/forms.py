"""
Minimal form builder used by the resource library filters.

Filters describe their controls through ``add_element``, ``set_default`` and
``set_type``; the collected elements are rendered by the page template and
``get_data`` cleans a submission according to the declared types.
"""

import logging
import re
from enum import Enum
from typing import Any, Mapping, Optional

from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)

_TAG_RE = re.compile(r"<[^>]*>")
_FALSE_VALUES = {"0", "false", "no", "off"}


class ParamType(str, Enum):
    BOOL = "bool"
    INT = "int"
    TEXT = "text"
    NOTAGS = "notags"


class FormElement(BaseModel):
    kind: str
    name: str
    label: str
    options: Optional[dict[str, str]] = None
    default: Any = None
    param_type: ParamType = ParamType.TEXT
    attributes: dict[str, Any] = Field(default_factory=dict)


def clean_param(value: Any, param_type: ParamType) -> Any:
    """
    Clean one submitted value.

    Empty strings are kept as ``""`` for every type so that "submitted but
    empty" stays distinguishable from a real value.
    """
    if value is None:
        return ""
    if isinstance(value, (list, tuple)):
        value = value[-1] if value else ""

    if param_type == ParamType.BOOL:
        if isinstance(value, bool):
            return int(value)
        text = str(value).strip().lower()
        if text == "":
            return ""
        return 0 if text in _FALSE_VALUES else 1

    if param_type == ParamType.INT:
        if isinstance(value, bool):
            return int(value)
        if isinstance(value, int):
            return value
        text = str(value).strip()
        if re.fullmatch(r"-?\d+", text):
            return int(text)
        # Left for the filter to interpret (e.g. ISO dates)
        return text

    text = str(value)
    if param_type == ParamType.NOTAGS:
        text = _TAG_RE.sub("", text)
    return text.strip()


class FilterForm:
    """Collects form elements declared by filters."""

    def __init__(self, action: str = "", method: str = "get"):
        self.action = action
        self.method = method
        self._elements: dict[str, FormElement] = {}

    @property
    def elements(self) -> list[FormElement]:
        return list(self._elements.values())

    def get_element(self, name: str) -> FormElement:
        return self._elements[name]

    def add_element(self, kind: str, name: str, label: str, options: Optional[Mapping[Any, Any]] = None, **attributes):
        if name in self._elements:
            raise ValueError(f"Form element '{name}' already exists")
        self._elements[name] = FormElement(
            kind=kind,
            name=name,
            label=label,
            options={str(k): str(v) for k, v in options.items()} if options is not None else None,
            attributes=attributes,
        )
        return self._elements[name]

    def set_default(self, name: str, value: Any) -> None:
        self._elements[name].default = value

    def set_type(self, name: str, param_type: ParamType) -> None:
        self._elements[name].param_type = param_type

    def get_data(self, submitted: Mapping[str, Any]) -> dict[str, Any]:
        """
        Return the cleaned values of registered elements present in ``submitted``.

        ``submitted`` is not modified.
        """
        data = {}
        for name, element in self._elements.items():
            if name not in submitted:
                continue
            data[name] = clean_param(submitted[name], element.param_type)
        logger.debug(f"Cleaned form data: {sorted(data)}")
        return data
