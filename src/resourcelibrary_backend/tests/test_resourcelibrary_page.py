"""Tests for the resource library page: site vs course view and access checks."""

import pytest

from resourcelibrary_backend.business_logic.courses import create_course, create_module
from resourcelibrary_backend.customfield import CourseHandler
from resourcelibrary_backend.exceptions import (
    CourseAccessDeniedException,
    CourseNotFoundException,
    UnauthorizedException,
)
from resourcelibrary_backend.output import ActivityResourceLibrary, CourseResourceLibrary, ResourceLibraryRenderer
from resourcelibrary_backend.pages.resourcelibrary import (
    CONTEXT_COURSE,
    CONTEXT_SYSTEM,
    STR_COURSERESOURCELIBRARY,
    STR_RESOURCELIBRARY,
    RequestContext,
    build_resource_library_page,
    render_resource_library_page,
)
from resourcelibrary_backend.permissions.auth import build_principal
from resourcelibrary_backend.permissions.principal import Principal
from resourcelibrary_backend.schemas.courses import CourseCreate, CourseModuleCreate
from resourcelibrary_backend.schemas.customfields import FieldCreate, FieldType
from resourcelibrary_backend.settings import settings


@pytest.fixture
def course(db, resourcelibrary_fields):
    course = create_course(db, CourseCreate(shortname="c1", fullname="Course 1", customfield_f2=1))
    db.commit()
    return course


class TestSiteView:

    def test_without_courseid(self, db, admin_principal):
        page = build_resource_library_page(RequestContext(db=db, principal=admin_principal))

        assert page.context_level == CONTEXT_SYSTEM
        assert page.courseid == settings.SITE_ID
        assert page.url == "/resourcelibrary"
        assert page.title == STR_RESOURCELIBRARY
        assert page.heading == STR_RESOURCELIBRARY
        assert isinstance(page.renderable, CourseResourceLibrary)
        assert page.navbar == []

    def test_explicit_site_id(self, db, admin_principal):
        page = build_resource_library_page(RequestContext(db=db, principal=admin_principal), settings.SITE_ID)

        assert page.context_level == CONTEXT_SYSTEM
        assert page.url == "/resourcelibrary"
        assert page.navbar == []

    def test_any_user_may_open_site_view(self, db, student_user):
        page = build_resource_library_page(RequestContext(db=db, principal=build_principal(db, student_user.username)))
        assert page.context_level == CONTEXT_SYSTEM


class TestCourseView:

    def test_course_page(self, db, admin_principal, course):
        page = build_resource_library_page(RequestContext(db=db, principal=admin_principal), course.id)

        assert page.context_level == CONTEXT_COURSE
        assert page.courseid == course.id
        assert page.url == f"/resourcelibrary?courseid={course.id}"
        assert page.title == STR_RESOURCELIBRARY
        assert page.heading == STR_RESOURCELIBRARY
        assert isinstance(page.renderable, ActivityResourceLibrary)
        assert page.renderable.courseid == course.id

    def test_breadcrumb_links_to_site_library(self, db, admin_principal, course):
        page = build_resource_library_page(RequestContext(db=db, principal=admin_principal), course.id)

        assert len(page.navbar) == 1
        item = page.navbar[0]
        assert item.text == STR_COURSERESOURCELIBRARY
        assert item.url == "/resourcelibrary"
        assert item.key == "mainlibrary"

    def test_renderer_base_url(self, db, admin_principal, course):
        ctx = RequestContext(db=db, principal=admin_principal, renderer=ResourceLibraryRenderer("/library"))
        page = build_resource_library_page(ctx, course.id)

        assert page.url == f"/library?courseid={course.id}"
        assert page.navbar[0].url == "/library"

    def test_enrolled_student(self, db, student_user, enrol, course):
        enrol(student_user, course.id)
        principal = build_principal(db, student_user.username)

        page = build_resource_library_page(RequestContext(db=db, principal=principal), course.id)
        assert page.context_level == CONTEXT_COURSE


class TestAccess:

    def test_missing_course(self, db, admin_principal):
        with pytest.raises(CourseNotFoundException):
            build_resource_library_page(RequestContext(db=db, principal=admin_principal), 999)

    def test_not_enrolled(self, db, student_user, course):
        principal = build_principal(db, student_user.username)
        with pytest.raises(CourseAccessDeniedException):
            build_resource_library_page(RequestContext(db=db, principal=principal), course.id)

    def test_anonymous(self, db, course):
        with pytest.raises(UnauthorizedException):
            build_resource_library_page(RequestContext(db=db, principal=Principal()), course.id)

    def test_unknown_user(self, db):
        with pytest.raises(UnauthorizedException):
            build_principal(db, "nobody")


class TestRendering:

    def test_site_page_lists_courses(self, db, admin_principal, course):
        html = render_resource_library_page(RequestContext(db=db, principal=admin_principal))

        assert "<title>Resource library</title>" in html
        assert 'class="context-system"' in html
        assert "Course 1" in html
        assert 'href="/resourcelibrary?courseid=' in html
        assert 'data-key="mainlibrary"' not in html
        assert 'name="customfield_f2"' in html

    def test_course_page_lists_modules(self, db, admin_principal, course):
        create_module(db, CourseModuleCreate(course=course.id, name="Welcome", customfield_f1="hello"))
        html = render_resource_library_page(RequestContext(db=db, principal=admin_principal), course.id)

        assert 'class="context-course"' in html
        assert 'data-key="mainlibrary"' in html
        assert "Course resource library" in html
        assert "Welcome" in html
        assert '<dd data-field="f1">hello</dd>' in html

    def test_filters_narrow_the_list(self, db, admin_principal, course):
        create_course(db, CourseCreate(shortname="c2", fullname="Unchecked course", customfield_f2=0))
        ctx = RequestContext(db=db, principal=admin_principal, formdata={"customfield_f2": "1"})

        html = render_resource_library_page(ctx)

        assert "Course 1" in html
        assert "Unchecked course" not in html
        assert "match the filters" in html

    def test_empty_library(self, db, admin_principal):
        html = render_resource_library_page(RequestContext(db=db, principal=admin_principal))
        assert "No courses found." in html

    def test_date_operator_does_not_clash_with_field_names(self, db, admin_principal, resourcelibrary_fields):
        handler = CourseHandler(db)
        categoryid = resourcelibrary_fields["course"]["f3"].categoryid
        handler.create_field(FieldCreate(categoryid=categoryid, type=FieldType.TEXT, shortname="f3_op"))

        html = render_resource_library_page(RequestContext(db=db, principal=admin_principal))

        assert 'name="op_customfield_f3"' in html
        assert 'name="customfield_f3_op"' in html


class TestFormRedisplay:

    @pytest.fixture
    def checked_by_default(self, db, resourcelibrary_fields):
        handler = CourseHandler(db)
        categoryid = resourcelibrary_fields["course"]["f1"].categoryid
        return handler.create_field(FieldCreate(
            categoryid=categoryid, type=FieldType.CHECKBOX, shortname="f6", configdata={"checkbydefault": 1},
        ))

    def element_values(self, db, formdata) -> dict:
        context = CourseResourceLibrary(db, formdata).export_for_template(ResourceLibraryRenderer())
        return {element["name"]: element["value"] for element in context["elements"]}

    def test_defaults_prefill_a_fresh_form(self, db, checked_by_default):
        values = self.element_values(db, {})
        assert values["customfield_f6"] is True
        assert values["customfield_f4"] == 0

    def test_unchecked_box_stays_unchecked_after_submit(self, db, checked_by_default):
        context = CourseResourceLibrary(db, {"customfield_f1": "x"}).export_for_template(ResourceLibraryRenderer())
        values = {element["name"]: element["value"] for element in context["elements"]}

        assert values["customfield_f1"] == "x"
        assert not values["customfield_f6"]
        assert context["filtered"]

    def test_submitted_values_are_shown(self, db, checked_by_default):
        values = self.element_values(db, {"customfield_f6": "1", "customfield_f4": "2"})
        assert values["customfield_f6"] == 1
        assert values["customfield_f4"] == 2
