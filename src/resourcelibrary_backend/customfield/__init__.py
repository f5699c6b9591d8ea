from resourcelibrary_backend.customfield.handler import (
    CustomFieldHandler,
    CourseHandler,
    CourseModuleHandler,
)
from resourcelibrary_backend.customfield.fields import (
    DATA_COLUMNS,
    form_element_name,
    parse_timestamp,
)

__all__ = [
    "CustomFieldHandler",
    "CourseHandler",
    "CourseModuleHandler",
    "DATA_COLUMNS",
    "form_element_name",
    "parse_timestamp",
]
