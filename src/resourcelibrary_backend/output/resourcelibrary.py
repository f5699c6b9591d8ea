"""
Renderables of the resource library: the site-wide list of courses and the
list of modules of one course, each with its custom field filter form.
"""

from typing import Any, Mapping, Optional

from sqlalchemy.orm import Session

from resourcelibrary_backend.customfield import CustomFieldHandler
from resourcelibrary_backend.filters import ResourceLibraryFilters
from resourcelibrary_backend.forms import FilterForm
from resourcelibrary_backend.repositories.resource_library import ResourceLibraryRepository


def _form_context(form: FilterForm, data: Mapping[str, Any]) -> list[dict]:
    # Defaults prefill an unsubmitted form only; after a submission an absent
    # element (an unchecked box) renders empty
    submitted = bool(data)
    elements = []
    for element in form.elements:
        exported = element.model_dump()
        exported["value"] = data.get(element.name) if submitted else element.default
        elements.append(exported)
    return elements


def _fields_context(handler: CustomFieldHandler, values: dict[str, str]) -> list[dict]:
    return [
        {"shortname": field.shortname, "label": field.name, "value": values[field.shortname]}
        for field in handler.get_fields()
        if values.get(field.shortname)
    ]


class _ResourceLibrary:
    template_name: str = None

    def __init__(self, db: Session, formdata: Optional[Mapping[str, Any]] = None):
        self.db = db
        self.formdata = formdata or {}
        self.repository = ResourceLibraryRepository(db)

    def _filters(self) -> ResourceLibraryFilters:
        raise NotImplementedError

    def _build_form(self) -> tuple[FilterForm, dict[str, Any]]:
        form = FilterForm()
        self._filters().add_to_form(form)
        return form, form.get_data(self.formdata)


class CourseResourceLibrary(_ResourceLibrary):
    """All courses of the site, narrowed by the course custom field filters."""

    template_name = "course_resourcelibrary.html"

    def _filters(self) -> ResourceLibraryFilters:
        return self.repository.course_filters

    def export_for_template(self, renderer) -> dict:
        form, data = self._build_form()
        courses = self.repository.search_courses(data)
        handler = self.repository.course_handler
        values = handler.export_instances_data_object([course.id for course in courses])
        items = [
            {
                "id": course.id,
                "name": course.fullname,
                "shortname": course.shortname,
                "summary": course.summary or "",
                "url": renderer.library_url(courseid=course.id),
                "customfields": _fields_context(handler, values.get(course.id, {})),
            }
            for course in courses
        ]
        return {
            "action": renderer.library_url(),
            "courseid": None,
            "elements": _form_context(form, data),
            "items": items,
            "count": len(items),
            "filtered": bool(self.repository.course_filters.check_data(data)),
        }


class ActivityResourceLibrary(_ResourceLibrary):
    """Modules of one course, narrowed by the module custom field filters."""

    template_name = "activity_resourcelibrary.html"

    def __init__(self, db: Session, courseid: int, formdata: Optional[Mapping[str, Any]] = None):
        super().__init__(db, formdata)
        self.courseid = courseid

    def _filters(self) -> ResourceLibraryFilters:
        return self.repository.module_filters

    def export_for_template(self, renderer) -> dict:
        form, data = self._build_form()
        modules = self.repository.search_course_modules(self.courseid, data)
        handler = self.repository.module_handler
        values = handler.export_instances_data_object([module.id for module in modules])
        items = [
            {
                "id": module.id,
                "name": module.name,
                "modname": module.modname,
                "customfields": _fields_context(handler, values.get(module.id, {})),
            }
            for module in modules
        ]
        return {
            "action": renderer.library_url(courseid=self.courseid),
            "courseid": self.courseid,
            "elements": _form_context(form, data),
            "items": items,
            "count": len(items),
            "filtered": bool(self.repository.module_filters.check_data(data)),
        }
