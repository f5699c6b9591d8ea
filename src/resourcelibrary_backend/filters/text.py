from typing import Any, Optional

from resourcelibrary_backend.filters.base import NO_FILTER, BaseFilter, SqlFilter, as_mapping
from resourcelibrary_backend.forms import FilterForm, ParamType
from resourcelibrary_backend.schemas.customfields import FieldType


def escape_like(value: str, escape: str = "\\") -> str:
    return (
        value.replace(escape, escape * 2)
        .replace("%", f"{escape}%")
        .replace("_", f"{escape}_")
    )


class TextFilter(BaseFilter):
    """Case-insensitive "contains" filter on a short text field."""

    field_type = FieldType.TEXT
    param_prefix = "ex_text"

    def add_to_form(self, form: FilterForm) -> None:
        form.add_element("text", self._name, self._label)
        form.set_type(self._name, ParamType.NOTAGS)

    def check_data(self, formdata: Any) -> Optional[dict]:
        value = as_mapping(formdata).get(self._name)
        if value is None:
            return None
        value = str(value).strip()
        return {'value': value} if value else None

    def get_sql_filter(self, data: Optional[dict]) -> SqlFilter:
        name = self._next_param_name()
        if not data:
            return NO_FILTER
        pattern = f"%{escape_like(data['value'].lower())}%"
        return f"LOWER({self.get_sql_field_name()}) LIKE :{name} ESCAPE '\\'", {name: pattern}


class TextareaFilter(TextFilter):
    """Same matching as ``TextFilter``, on a long text field."""

    field_type = FieldType.TEXTAREA
    param_prefix = "ex_textarea"
