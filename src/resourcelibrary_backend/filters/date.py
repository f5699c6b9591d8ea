from typing import Any, Optional

from resourcelibrary_backend.customfield.fields import parse_timestamp
from resourcelibrary_backend.filters.base import NO_FILTER, BaseFilter, SqlFilter, as_mapping
from resourcelibrary_backend.forms import FilterForm, ParamType
from resourcelibrary_backend.schemas.customfields import FieldType

OPERATOR_AFTER = "after"
OPERATOR_BEFORE = "before"

OPERATORS = {
    OPERATOR_AFTER: ("On or after", ">="),
    OPERATOR_BEFORE: ("On or before", "<="),
}


class DateFilter(BaseFilter):
    """Filter on a date field: stored timestamp on or after / on or before a date."""

    field_type = FieldType.DATE
    param_prefix = "ex_date"

    @property
    def operator_name(self) -> str:
        return f"op_{self._name}"

    def add_to_form(self, form: FilterForm) -> None:
        form.add_element(
            "select",
            self.operator_name,
            f"{self._label} (condition)",
            {key: label for key, (label, _) in OPERATORS.items()},
        )
        form.set_default(self.operator_name, OPERATOR_AFTER)
        form.set_type(self.operator_name, ParamType.TEXT)

        form.add_element(
            "date_selector",
            self._name,
            self._label,
            startyear=self._field.get_configdata_property('startyear'),
            endyear=self._field.get_configdata_property('endyear'),
        )
        form.set_type(self._name, ParamType.INT)

    def check_data(self, formdata: Any) -> Optional[dict]:
        data = as_mapping(formdata)
        operator = data.get(self.operator_name) or OPERATOR_AFTER
        if operator not in OPERATORS:
            return None
        # A bare date compared with "before" covers the whole day
        timestamp = parse_timestamp(data.get(self._name), end_of_day=operator == OPERATOR_BEFORE)
        if timestamp is None:
            return None
        return {'value': timestamp, 'operator': operator}

    def get_sql_filter(self, data: Optional[dict]) -> SqlFilter:
        name = self._next_param_name()
        if not data:
            return NO_FILTER
        _, comparison = OPERATORS[data.get('operator', OPERATOR_AFTER)]
        return f"{self.get_sql_field_name()} {comparison} :{name}", {name: data['value']}
