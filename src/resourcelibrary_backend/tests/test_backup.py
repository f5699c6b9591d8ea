"""Tests for backup and restore of courses with their custom field values."""

import pytest

from resourcelibrary_backend.business_logic.backup import backup_course, restore_course
from resourcelibrary_backend.business_logic.courses import create_course, create_module
from resourcelibrary_backend.customfield import CourseHandler, CourseModuleHandler
from resourcelibrary_backend.exceptions import BadRequestException, CourseNotFoundException
from resourcelibrary_backend.model.course import Course, CourseModule
from resourcelibrary_backend.model.customfield import CustomFieldField
from resourcelibrary_backend.schemas.backup import BACKUP_FORMAT_VERSION, CourseBackup
from resourcelibrary_backend.schemas.courses import CourseCreate, CourseModuleCreate
from resourcelibrary_backend.settings import settings

from .test_customfields import DISPLAYED, FIELD_VALUES


@pytest.fixture
def course_with_content(db, resourcelibrary_fields):
    course = create_course(db, CourseCreate(shortname="c1", fullname="Course 1", summary="About", **FIELD_VALUES))
    module = create_module(db, CourseModuleCreate(course=course.id, name="Intro", **FIELD_VALUES))
    db.commit()
    return course, module


def test_backup_contains_raw_values(db, course_with_content):
    course, module = course_with_content
    backup = backup_course(db, course.id)

    assert backup.format_version == BACKUP_FORMAT_VERSION
    assert backup.shortname == "c1"
    assert set(backup.customfields) == {"f1", "f2", "f3", "f4", "f5"}
    assert backup.customfields["f4"].type == "select"
    assert backup.customfields["f4"].intvalue == 2
    assert len(backup.modules) == 1
    assert backup.modules[0].name == "Intro"
    assert backup.modules[0].customfields["f1"].charvalue == "some text"


def test_backup_survives_json(db, course_with_content):
    course, _ = course_with_content
    backup = CourseBackup.model_validate_json(backup_course(db, course.id).model_dump_json())
    assert backup.customfields["f5"].valueformat == 1


def test_restore_as_new_course(db, course_with_content):
    course, _ = course_with_content
    backup = backup_course(db, course.id)

    result = restore_course(db, backup)
    db.commit()

    assert result.course_id != course.id
    assert result.shortname == "c1_1"
    assert result.modules_restored == 1
    assert result.values_restored == 10
    assert result.values_skipped == 0

    assert CourseHandler(db).export_instance_data_object(result.course_id) == DISPLAYED
    restored_module = db.query(CourseModule).filter(CourseModule.course_id == result.course_id).one()
    assert restored_module.name == "Intro"
    assert CourseModuleHandler(db).export_instance_data_object(restored_module.id) == DISPLAYED


def test_restore_twice_picks_next_shortname(db, course_with_content):
    course, _ = course_with_content
    backup = backup_course(db, course.id)
    restore_course(db, backup)
    assert restore_course(db, backup).shortname == "c1_2"


def test_restore_into_existing_course(db, course_with_content):
    course, _ = course_with_content
    backup = backup_course(db, course.id)
    target = create_course(db, CourseCreate(shortname="target", fullname="Target", customfield_f1="old"))

    result = restore_course(db, backup, target_course_id=target.id)

    assert result.course_id == target.id
    assert result.shortname == "target"
    assert CourseHandler(db).export_instance_data_object(target.id)["f1"] == "some text"
    assert db.query(CourseModule).filter(CourseModule.course_id == target.id).count() == 1


def test_restore_skips_unknown_and_mismatched_fields(db, course_with_content):
    course, _ = course_with_content
    backup = backup_course(db, course.id)

    # f2 becomes a text field on the restoring site, f5 disappears
    course_f2 = CourseHandler(db).get_field_by_shortname("f2")
    db.query(CustomFieldField).filter(CustomFieldField.id == course_f2.id).update({"type": "text"})
    course_f5 = CourseHandler(db).get_field_by_shortname("f5")
    db.query(CustomFieldField).filter(CustomFieldField.id == course_f5.id).update({"shortname": "f5_renamed"})

    result = restore_course(db, backup)

    assert result.values_restored == 8
    assert result.values_skipped == 2
    values = CourseHandler(db).export_instance_data_object(result.course_id)
    assert "f2" not in values
    assert "f5" not in values


def test_backup_errors(db, resourcelibrary_fields):
    with pytest.raises(CourseNotFoundException):
        backup_course(db, 999)
    with pytest.raises(BadRequestException):
        backup_course(db, settings.SITE_ID)


def test_restore_errors(db, course_with_content):
    course, _ = course_with_content
    backup = backup_course(db, course.id)

    with pytest.raises(BadRequestException):
        restore_course(db, backup, target_course_id=settings.SITE_ID)
    with pytest.raises(CourseNotFoundException):
        restore_course(db, backup, target_course_id=999)
    with pytest.raises(BadRequestException):
        restore_course(db, backup.model_copy(update={"format_version": BACKUP_FORMAT_VERSION + 1}))

    assert db.query(Course).count() == 2
