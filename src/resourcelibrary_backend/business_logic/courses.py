"""
Business logic for courses and course modules carrying custom field values.
"""

import logging
from typing import Any, Mapping

from sqlalchemy import text
from sqlalchemy.orm import Session

from resourcelibrary_backend.customfield import CourseHandler, CourseModuleHandler
from resourcelibrary_backend.exceptions import (
    BadRequestException,
    ConflictException,
    CourseNotFoundException,
    NotFoundException,
)
from resourcelibrary_backend.model.course import Course, CourseModule
from resourcelibrary_backend.schemas.courses import CourseCreate, CourseModuleCreate
from resourcelibrary_backend.settings import settings

logger = logging.getLogger(__name__)


def ensure_site_course(db: Session) -> Course:
    """Create the site course (id ``settings.SITE_ID``) if missing."""
    site = db.query(Course).filter(Course.id == settings.SITE_ID).first()
    if site is None:
        site = Course(id=settings.SITE_ID, shortname="site", fullname="Site", summary="")
        db.add(site)
        db.flush()
        if db.get_bind().dialect.name == "postgresql":
            # Explicit id insert does not advance the serial sequence
            db.execute(text("SELECT setval(pg_get_serial_sequence('course', 'id'), (SELECT MAX(id) FROM course))"))
        logger.info(f"Created site course with id {settings.SITE_ID}")
    return site


def get_course_or_throw(db: Session, course_id: int) -> Course:
    course = db.query(Course).filter(Course.id == course_id).first()
    if course is None:
        raise CourseNotFoundException(detail=f"Course {course_id} not found")
    return course


def create_course(db: Session, course: CourseCreate) -> Course:
    """
    Create a course and store the custom field values sent with it.

    Raises:
        ConflictException: If the shortname is already used
    """
    if db.query(Course).filter(Course.shortname == course.shortname).first() is not None:
        raise ConflictException(
            detail=f"Course shortname '{course.shortname}' is already used",
            context={"shortname": course.shortname},
        )

    db_course = Course(
        shortname=course.shortname,
        fullname=course.fullname,
        summary=course.summary,
        summaryformat=course.summaryformat,
    )
    db.add(db_course)
    db.flush()

    CourseHandler(db).instance_form_save(db_course.id, course.customfield_data())
    logger.info(f"Created course {db_course.id} ({db_course.shortname})")
    return db_course


def course_update_fields(db: Session, course_id: int, data: Mapping[str, Any]) -> int:
    """Store custom field values of an existing course. Returns the number stored."""
    get_course_or_throw(db, course_id)
    return CourseHandler(db).instance_form_save(course_id, data)


def create_module(db: Session, module: CourseModuleCreate) -> CourseModule:
    """Create a module in a course and store its custom field values."""
    course = get_course_or_throw(db, module.course)
    if course.id == settings.SITE_ID:
        raise BadRequestException(detail="Modules cannot be added to the site course")

    db_module = CourseModule(
        course_id=course.id,
        modname=module.modname,
        name=module.name or module.modname,
        intro=module.intro,
        visible=module.visible,
    )
    db.add(db_module)
    db.flush()

    CourseModuleHandler(db).instance_form_save(db_module.id, module.customfield_data())
    logger.info(f"Created {db_module.modname} module {db_module.id} in course {course.id}")
    return db_module


def delete_module(db: Session, cmid: int) -> None:
    module = db.query(CourseModule).filter(CourseModule.id == cmid).first()
    if module is None:
        raise NotFoundException(detail=f"Course module {cmid} not found")

    CourseModuleHandler(db).delete_instance(cmid)
    db.delete(module)
    db.flush()
    logger.info(f"Deleted course module {cmid}")


def delete_course(db: Session, course_id: int) -> None:
    """Delete a course, its modules, and all their custom field values."""
    if course_id == settings.SITE_ID:
        raise BadRequestException(detail="The site course cannot be deleted")
    course = get_course_or_throw(db, course_id)

    module_handler = CourseModuleHandler(db)
    for module in course.modules:
        module_handler.delete_instance(module.id)
    CourseHandler(db).delete_instance(course_id)

    db.delete(course)
    db.flush()
    logger.info(f"Deleted course {course_id}")
