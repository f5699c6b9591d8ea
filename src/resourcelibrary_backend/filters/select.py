from typing import Any, Optional

from resourcelibrary_backend.filters.base import NO_FILTER, BaseFilter, SqlFilter, as_mapping
from resourcelibrary_backend.forms import FilterForm, ParamType
from resourcelibrary_backend.schemas.customfields import FieldType

ANY_OPTION = "Any"


class SelectFilter(BaseFilter):
    """
    Filter on a select field. Values are 1-based option indexes, as stored;
    index 0 is "Any" and does not filter.
    """

    field_type = FieldType.SELECT
    param_prefix = "ex_select"

    def get_choices(self) -> dict[int, str]:
        choices = {0: ANY_OPTION}
        choices.update({index: option for index, option in enumerate(self._field.get_options(), start=1)})
        return choices

    def add_to_form(self, form: FilterForm) -> None:
        form.add_element("select", self._name, self._label, self.get_choices())
        form.set_default(self._name, 0)
        form.set_type(self._name, ParamType.INT)

    def check_data(self, formdata: Any) -> Optional[dict]:
        value = as_mapping(formdata).get(self._name)
        if value is None or value == '' or isinstance(value, bool):
            return None
        try:
            index = int(value)
        except (TypeError, ValueError):
            return None
        if 0 < index <= len(self._field.get_options()):
            return {'value': index}
        return None

    def get_sql_filter(self, data: Optional[dict]) -> SqlFilter:
        name = self._next_param_name()
        if not data:
            return NO_FILTER
        return f"{self.get_sql_field_name()} = :{name}", {name: data['value']}
