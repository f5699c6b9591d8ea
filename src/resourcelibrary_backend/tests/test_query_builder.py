"""Tests for combining filter conditions and running the filtered searches."""

from datetime import datetime, timezone

import pytest

from resourcelibrary_backend.business_logic.courses import create_course, create_module
from resourcelibrary_backend.exceptions import QueryParameterConflictException
from resourcelibrary_backend.filters import ResourceLibraryFilters
from resourcelibrary_backend.filters.query import build_filtered_query, combine_fragments
from resourcelibrary_backend.repositories.resource_library import ResourceLibraryRepository
from resourcelibrary_backend.schemas.courses import CourseCreate, CourseModuleCreate
from resourcelibrary_backend.schemas.customfields import FieldDefinition, FieldType


def timestamp(year: int, month: int, day: int) -> int:
    return int(datetime(year, month, day, tzinfo=timezone.utc).timestamp())


@pytest.mark.unit
class TestCombineFragments:

    def test_skips_empty_fragments(self):
        assert combine_fragments([(None, None), ("a = :p0", {"p0": 1}), (None, None)]) == ("a = :p0", {"p0": 1})

    def test_joins_with_and(self):
        condition, params = combine_fragments([("a = :p0", {"p0": 1}), ("b = :p1", {"p1": 2})])
        assert condition == "a = :p0 AND b = :p1"
        assert params == {"p0": 1, "p1": 2}

    def test_nothing_left(self):
        assert combine_fragments([(None, None)]) == (None, {})
        assert combine_fragments([]) == (None, {})

    def test_conflicting_names(self):
        with pytest.raises(QueryParameterConflictException) as exc_info:
            combine_fragments([("a = :p0", {"p0": 1}), ("b = :p0", {"p0": 2})])
        assert exc_info.value.context["parameter"] == "p0"


@pytest.mark.unit
class TestBuildFilteredQuery:

    @pytest.fixture
    def filters(self):
        return ResourceLibraryFilters([
            FieldDefinition(id=11, shortname="f1", name="Field 1", type=FieldType.TEXT),
            FieldDefinition(id=12, shortname="f2", name="Field 2", type=FieldType.CHECKBOX),
        ])

    def test_no_active_filter(self, filters):
        statement = build_filtered_query("course", filters, {})
        assert statement.text == "SELECT e.id FROM course e ORDER BY e.id"

    def test_active_filters_join_their_field(self, filters):
        statement = build_filtered_query(
            "course_module", filters, {"customfield_f2": "1"},
            where="e.course_id = :courseid", params={"courseid": 5}, limit=10,
        )

        assert statement.text == (
            "SELECT e.id FROM course_module e "
            "JOIN customfield_data cf_f2 ON cf_f2.instanceid = e.id AND cf_f2.fieldid = :cf_f2_fieldid "
            "WHERE e.course_id = :courseid AND cf_f2.value = :ex_checkbox0 "
            "ORDER BY e.id LIMIT :result_limit"
        )
        assert statement.compile().params == {
            "courseid": 5,
            "ex_checkbox0": "1",
            "cf_f2_fieldid": 12,
            "result_limit": 10,
        }

    def test_where_conflicting_with_filter_params(self, filters):
        with pytest.raises(QueryParameterConflictException):
            build_filtered_query(
                "course", filters, {"customfield_f2": "1"},
                where="e.id = :ex_checkbox0", params={"ex_checkbox0": 1},
            )


@pytest.fixture
def library(db, resourcelibrary_fields):
    """Three courses and, in the first, three modules with different field values."""
    courses = [
        create_course(db, CourseCreate(
            shortname="algebra", fullname="Algebra", customfield_f1="Linear Algebra notes",
            customfield_f2=1, customfield_f3=timestamp(2020, 3, 1), customfield_f4=1,
        )),
        create_course(db, CourseCreate(
            shortname="biology", fullname="Biology", customfield_f1="Cells 100%",
            customfield_f2=0, customfield_f3=timestamp(2021, 6, 15), customfield_f4=2,
        )),
        create_course(db, CourseCreate(shortname="chemistry", fullname="Chemistry")),
    ]
    modules = [
        create_module(db, CourseModuleCreate(
            course=courses[0].id, name="Slides", customfield_f2=1,
            customfield_f5_editor={"text": "Matrices and vectors", "format": 1},
        )),
        create_module(db, CourseModuleCreate(course=courses[0].id, name="Quiz", customfield_f2=0)),
        create_module(db, CourseModuleCreate(course=courses[0].id, name="Hidden", visible=False, customfield_f2=1)),
        create_module(db, CourseModuleCreate(course=courses[1].id, name="Other course", customfield_f2=1)),
    ]
    db.commit()
    return courses, modules


def shortnames(courses) -> list[str]:
    return [course.shortname for course in courses]


class TestCourseSearch:

    def test_without_filters_lists_all_but_site(self, db, library):
        assert shortnames(ResourceLibraryRepository(db).search_courses({})) == ["algebra", "biology", "chemistry"]

    def test_checkbox(self, db, library):
        repository = ResourceLibraryRepository(db)
        assert shortnames(repository.search_courses({"customfield_f2": "1"})) == ["algebra"]

    def test_text_is_case_insensitive_contains(self, db, library):
        repository = ResourceLibraryRepository(db)
        assert shortnames(repository.search_courses({"customfield_f1": "algebra"})) == ["algebra"]

    def test_text_wildcards_are_literal(self, db, library):
        assert shortnames(ResourceLibraryRepository(db).search_courses({"customfield_f1": "100%"})) == ["biology"]
        assert ResourceLibraryRepository(db).search_courses({"customfield_f1": "%"}) != []
        assert ResourceLibraryRepository(db).search_courses({"customfield_f1": "_"}) == []

    def test_select(self, db, library):
        assert shortnames(ResourceLibraryRepository(db).search_courses({"customfield_f4": 2})) == ["biology"]

    def test_select_any(self, db, library):
        assert len(ResourceLibraryRepository(db).search_courses({"customfield_f4": 0})) == 3

    def test_date_after(self, db, library):
        repository = ResourceLibraryRepository(db)
        assert shortnames(repository.search_courses({"customfield_f3": "2021-01-01"})) == ["biology"]

    def test_date_before_includes_the_day(self, db, library):
        repository = ResourceLibraryRepository(db)
        found = repository.search_courses({"customfield_f3": "2020-03-01", "op_customfield_f3": "before"})
        assert shortnames(found) == ["algebra"]

    def test_filters_are_combined(self, db, library):
        repository = ResourceLibraryRepository(db)
        assert repository.search_courses({"customfield_f2": "1", "customfield_f4": 2}) == []

    def test_max_results(self, db, library):
        assert len(ResourceLibraryRepository(db, max_results=2).search_courses({})) == 2

    def test_repository_reuses_its_filters(self, db, library):
        repository = ResourceLibraryRepository(db)
        repository.search_courses({"customfield_f2": "1"})
        assert shortnames(repository.search_courses({"customfield_f2": "1"})) == ["algebra"]
        assert repository.course_filters.context.next_param_name("ex_checkbox") == "ex_checkbox2"


class TestModuleSearch:

    def test_visible_modules_of_course(self, db, library):
        courses, _ = library
        found = ResourceLibraryRepository(db).search_course_modules(courses[0].id, {})
        assert [module.name for module in found] == ["Slides", "Quiz"]

    def test_hidden_modules_do_not_use_up_the_limit(self, db, library):
        course = create_course(db, CourseCreate(shortname="limited", fullname="Limited"))
        create_module(db, CourseModuleCreate(course=course.id, name="Hidden first", visible=False))
        create_module(db, CourseModuleCreate(course=course.id, name="Shown"))

        found = ResourceLibraryRepository(db, max_results=1).search_course_modules(course.id, {})
        assert [module.name for module in found] == ["Shown"]

    def test_checkbox(self, db, library):
        courses, _ = library
        found = ResourceLibraryRepository(db).search_course_modules(courses[0].id, {"customfield_f2": "1"})
        assert [module.name for module in found] == ["Slides"]

    def test_textarea(self, db, library):
        courses, _ = library
        found = ResourceLibraryRepository(db).search_course_modules(courses[0].id, {"customfield_f5": "VECTORS"})
        assert [module.name for module in found] == ["Slides"]

    def test_course_filters_do_not_apply_to_modules(self, db, library):
        courses, _ = library
        found = ResourceLibraryRepository(db).search_course_modules(courses[0].id, {"customfield_f1": "algebra"})
        assert found == []
