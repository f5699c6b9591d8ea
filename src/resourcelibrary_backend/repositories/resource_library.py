"""
Resource library repository: runs the filtered queries built from the
custom field filters and loads the matching courses and modules.
"""

import logging
from typing import Any, Optional

from sqlalchemy.orm import Session

from resourcelibrary_backend.customfield import CourseHandler, CourseModuleHandler
from resourcelibrary_backend.filters import ResourceLibraryFilters
from resourcelibrary_backend.filters.query import build_filtered_query
from resourcelibrary_backend.model.course import Course, CourseModule
from resourcelibrary_backend.settings import settings

logger = logging.getLogger(__name__)


class ResourceLibraryRepository:
    """
    Query side of the resource library.

    Filters are built once per repository (one query context per request).
    """

    def __init__(self, db: Session, max_results: Optional[int] = None):
        self.db = db
        self.max_results = max_results or settings.RESOURCELIBRARY_MAX_RESULTS
        self.course_handler = CourseHandler(db)
        self.module_handler = CourseModuleHandler(db)
        self._course_filters: Optional[ResourceLibraryFilters] = None
        self._module_filters: Optional[ResourceLibraryFilters] = None

    @property
    def course_filters(self) -> ResourceLibraryFilters:
        if self._course_filters is None:
            self._course_filters = ResourceLibraryFilters(self.course_handler.get_fields())
        return self._course_filters

    @property
    def module_filters(self) -> ResourceLibraryFilters:
        if self._module_filters is None:
            self._module_filters = ResourceLibraryFilters(self.module_handler.get_fields())
        return self._module_filters

    def _find_ids(self, table: str, filters: ResourceLibraryFilters, formdata: Any, where: str, params: dict) -> list[int]:
        statement = build_filtered_query(table, filters, formdata, where=where, params=params, limit=self.max_results)
        return [row[0] for row in self.db.execute(statement)]

    def search_courses(self, formdata: Any) -> list[Course]:
        """Courses, except the site course, matching every active course filter."""
        ids = self._find_ids(
            Course.__tablename__,
            self.course_filters,
            formdata,
            where="e.id <> :siteid",
            params={"siteid": settings.SITE_ID},
        )
        if not ids:
            return []
        return self.db.query(Course).filter(Course.id.in_(ids)).order_by(Course.fullname, Course.id).all()

    def search_course_modules(self, course_id: int, formdata: Any) -> list[CourseModule]:
        """Visible modules of a course matching every active module filter."""
        ids = self._find_ids(
            CourseModule.__tablename__,
            self.module_filters,
            formdata,
            where="e.course_id = :courseid AND e.visible = :visible",
            params={"courseid": course_id, "visible": True},
        )
        if not ids:
            return []
        return (
            self.db.query(CourseModule)
            .filter(CourseModule.id.in_(ids))
            .order_by(CourseModule.id)
            .all()
        )
