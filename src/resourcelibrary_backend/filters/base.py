"""
Base class of the resource library filters.

A filter wraps one custom field. It adds its controls to the search form,
reads the submitted value back, and turns that value into a SQL condition
with bound parameters. Filters never run queries themselves.
"""

from abc import ABC, abstractmethod
from typing import Any, Callable, Mapping, Optional, Tuple

from pydantic import BaseModel

from resourcelibrary_backend.customfield.fields import DATA_COLUMNS, form_element_name
from resourcelibrary_backend.exceptions import TypeMismatchError
from resourcelibrary_backend.filters.context import QueryContext
from resourcelibrary_backend.forms import FilterForm
from resourcelibrary_backend.schemas.customfields import FieldDefinition, FieldType

SqlFilter = Tuple[Optional[str], Optional[dict]]
ColumnResolver = Callable[[FieldDefinition], str]

NO_FILTER: SqlFilter = (None, None)


def field_join_alias(field: FieldDefinition) -> str:
    """Alias under which the field's customfield_data row is joined."""
    return f"cf_{field.shortname}"


def customfield_column(field: FieldDefinition) -> str:
    """Default column resolver: the field type's data column on its joined alias."""
    return f"{field_join_alias(field)}.{DATA_COLUMNS[field.type]}"


def as_mapping(formdata: Any) -> Mapping[str, Any]:
    """Read-only view of submitted data given as a mapping, Pydantic model or plain object."""
    if formdata is None:
        return {}
    if isinstance(formdata, Mapping):
        return formdata
    if isinstance(formdata, BaseModel):
        return formdata.model_dump()
    return vars(formdata)


class BaseFilter(ABC):
    """
    Attributes:
        field_type: The one field type this variant accepts
        param_prefix: Prefix of the bound parameter names this variant generates
    """

    field_type: FieldType = None
    param_prefix: str = "ex_filter"

    def __init__(
        self,
        field: FieldDefinition,
        context: Optional[QueryContext] = None,
        column_resolver: Optional[ColumnResolver] = None,
    ):
        """
        Raises:
            TypeMismatchError: If the field's type is not ``field_type``
        """
        if field.type != self.field_type:
            raise TypeMismatchError(
                field_type=FieldType(field.type).value,
                expected_type=self.field_type.value if self.field_type else None,
                detail=f"{type(self).__name__} cannot filter {FieldType(field.type).value} field '{field.shortname}'",
            )
        self._field = field
        self._context = context if context is not None else QueryContext()
        self._column_resolver = column_resolver or customfield_column
        self._name = self.get_form_value_item_name()
        self._label = field.name or field.shortname

    @property
    def field(self) -> FieldDefinition:
        return self._field

    @property
    def name(self) -> str:
        return self._name

    @property
    def label(self) -> str:
        return self._label

    def get_form_value_item_name(self) -> str:
        return form_element_name(self._field.shortname)

    def get_sql_field_name(self) -> str:
        return self._column_resolver(self._field)

    def _next_param_name(self) -> str:
        return self._context.next_param_name(self.param_prefix)

    @abstractmethod
    def add_to_form(self, form: FilterForm) -> None:
        """Add this filter's controls to ``form``."""

    @abstractmethod
    def check_data(self, formdata: Any) -> Optional[dict]:
        """
        Read this filter's value from submitted data.

        Returns:
            ``{"value": ...}`` (variants may add keys) or None when not set
        """

    @abstractmethod
    def get_sql_filter(self, data: Optional[dict]) -> SqlFilter:
        """
        Returns:
            ``(condition, params)``, or ``(None, None)`` when ``data`` is empty
        """

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._field.shortname!r})"
