from typing import Any, Optional

from resourcelibrary_backend.filters.base import NO_FILTER, BaseFilter, SqlFilter, as_mapping
from resourcelibrary_backend.forms import FilterForm, ParamType
from resourcelibrary_backend.schemas.customfields import FieldType


class CheckboxFilter(BaseFilter):
    """
    Filter on a checkbox field.

    An unchecked box (absent or empty in the submission) means "do not filter
    on this field", not "only unchecked".
    """

    field_type = FieldType.CHECKBOX
    param_prefix = "ex_checkbox"

    def add_to_form(self, form: FilterForm) -> None:
        form.add_element("checkbox", self._name, self._label)
        form.set_default(self._name, bool(self._field.get_configdata_property('checkbydefault')))
        form.set_type(self._name, ParamType.BOOL)

    def check_data(self, formdata: Any) -> Optional[dict]:
        data = as_mapping(formdata)
        if self._name in data and data[self._name] != '':
            return {'value': str(data[self._name])}
        return None

    def get_sql_filter(self, data: Optional[dict]) -> SqlFilter:
        name = self._next_param_name()
        if not data:
            return NO_FILTER
        return f"{self.get_sql_field_name()} = :{name}", {name: data['value']}
