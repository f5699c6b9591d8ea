"""
Custom field filters for the resource library.

Usage:
    filters = ResourceLibraryFilters(CourseHandler(db).get_fields())
    form = FilterForm()
    filters.add_to_form(form)
    statement = build_filtered_query("course", filters, form.get_data(request.query_params))
"""

import logging
from typing import Any, Iterable, Optional

from resourcelibrary_backend.filters.base import (
    NO_FILTER,
    BaseFilter,
    ColumnResolver,
    SqlFilter,
    customfield_column,
    field_join_alias,
)
from resourcelibrary_backend.filters.checkbox import CheckboxFilter
from resourcelibrary_backend.filters.context import QueryContext
from resourcelibrary_backend.filters.date import DateFilter
from resourcelibrary_backend.filters.select import SelectFilter
from resourcelibrary_backend.filters.text import TextareaFilter, TextFilter
from resourcelibrary_backend.forms import FilterForm
from resourcelibrary_backend.schemas.customfields import FieldDefinition, FieldType

logger = logging.getLogger(__name__)

FILTER_CLASSES: dict[FieldType, type[BaseFilter]] = {
    FieldType.TEXT: TextFilter,
    FieldType.CHECKBOX: CheckboxFilter,
    FieldType.DATE: DateFilter,
    FieldType.SELECT: SelectFilter,
    FieldType.TEXTAREA: TextareaFilter,
}


def create_filter(
    field: FieldDefinition,
    context: Optional[QueryContext] = None,
    column_resolver: Optional[ColumnResolver] = None,
) -> BaseFilter:
    return FILTER_CLASSES[FieldType(field.type)](field, context=context, column_resolver=column_resolver)


class ResourceLibraryFilters:
    """One filter per field, all sharing one query context."""

    def __init__(
        self,
        fields: Iterable[FieldDefinition],
        context: Optional[QueryContext] = None,
        column_resolver: Optional[ColumnResolver] = None,
    ):
        self.context = context if context is not None else QueryContext()
        self.filters = [create_filter(field, self.context, column_resolver) for field in fields]

    def __iter__(self):
        return iter(self.filters)

    def __len__(self):
        return len(self.filters)

    def add_to_form(self, form: FilterForm) -> None:
        for filter_ in self.filters:
            filter_.add_to_form(form)

    def check_data(self, formdata: Any) -> dict[str, dict]:
        """Values of the filters that are set, by form element name."""
        values = {}
        for filter_ in self.filters:
            data = filter_.check_data(formdata)
            if data:
                values[filter_.name] = data
        return values

    def get_sql_filters(self, formdata: Any) -> list[tuple[BaseFilter, SqlFilter]]:
        """Filters that produced a condition, with their ``(condition, params)``."""
        active = []
        for filter_ in self.filters:
            condition, params = filter_.get_sql_filter(filter_.check_data(formdata))
            if condition is not None:
                active.append((filter_, (condition, params)))
        logger.debug(f"{len(active)} of {len(self.filters)} filters active")
        return active


__all__ = [
    "NO_FILTER",
    "BaseFilter",
    "CheckboxFilter",
    "DateFilter",
    "SelectFilter",
    "TextFilter",
    "TextareaFilter",
    "QueryContext",
    "SqlFilter",
    "FILTER_CLASSES",
    "create_filter",
    "customfield_column",
    "field_join_alias",
    "ResourceLibraryFilters",
]
