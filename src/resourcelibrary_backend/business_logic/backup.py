"""
Backup and restore of courses together with their custom field values.

Backups reference fields by shortname, so a backup can be restored on
another site as long as fields with the same shortname and type exist
there. Values for other shortnames are skipped.
"""

import logging
from typing import Optional

from sqlalchemy.orm import Session

from resourcelibrary_backend.business_logic.courses import get_course_or_throw
from resourcelibrary_backend.customfield import CourseHandler, CourseModuleHandler
from resourcelibrary_backend.exceptions import BadRequestException
from resourcelibrary_backend.model.course import Course, CourseModule
from resourcelibrary_backend.schemas.backup import (
    BACKUP_FORMAT_VERSION,
    CourseBackup,
    CourseModuleBackup,
    RestoreResult,
)
from resourcelibrary_backend.settings import settings

logger = logging.getLogger(__name__)


def backup_course(db: Session, course_id: int) -> CourseBackup:
    course = get_course_or_throw(db, course_id)
    if course.id == settings.SITE_ID:
        raise BadRequestException(detail="The site course cannot be backed up")

    module_handler = CourseModuleHandler(db)
    modules = [
        CourseModuleBackup(
            id=module.id,
            modname=module.modname,
            name=module.name,
            intro=module.intro,
            visible=module.visible,
            customfields=module_handler.export_instance_data(module.id),
        )
        for module in course.modules
    ]

    backup = CourseBackup(
        course_id=course.id,
        shortname=course.shortname,
        fullname=course.fullname,
        summary=course.summary,
        summaryformat=course.summaryformat,
        customfields=CourseHandler(db).export_instance_data(course.id),
        modules=modules,
    )
    logger.info(f"Backed up course {course_id} with {len(modules)} modules")
    return backup


def _available_shortname(db: Session, shortname: str) -> str:
    """``shortname``, or ``shortname_N`` with the first free N when taken."""
    candidate = shortname
    suffix = 0
    while db.query(Course.id).filter(Course.shortname == candidate).first() is not None:
        suffix += 1
        candidate = f"{shortname}_{suffix}"
    return candidate


def restore_course(db: Session, backup: CourseBackup, target_course_id: Optional[int] = None) -> RestoreResult:
    """
    Restore a backup into a new course, or add its content to an existing one.

    When restoring into an existing course the course's own field values are
    overwritten by the backed up ones; its modules are kept and the backed up
    modules are added.
    """
    if backup.format_version > BACKUP_FORMAT_VERSION:
        raise BadRequestException(
            detail=f"Unsupported backup format version {backup.format_version}",
            context={"supported": BACKUP_FORMAT_VERSION},
        )

    if target_course_id is None:
        course = Course(
            shortname=_available_shortname(db, backup.shortname),
            fullname=backup.fullname,
            summary=backup.summary,
            summaryformat=backup.summaryformat,
        )
        db.add(course)
        db.flush()
    else:
        if target_course_id == settings.SITE_ID:
            raise BadRequestException(detail="Cannot restore into the site course")
        course = get_course_or_throw(db, target_course_id)

    restored, skipped = CourseHandler(db).restore_instance_data(course.id, backup.customfields)

    module_handler = CourseModuleHandler(db)
    for module_backup in backup.modules:
        module = CourseModule(
            course_id=course.id,
            modname=module_backup.modname,
            name=module_backup.name,
            intro=module_backup.intro,
            visible=module_backup.visible,
        )
        db.add(module)
        db.flush()
        module_restored, module_skipped = module_handler.restore_instance_data(module.id, module_backup.customfields)
        restored += module_restored
        skipped += module_skipped

    logger.info(
        f"Restored backup of course {backup.course_id} into course {course.id} "
        f"({len(backup.modules)} modules, {restored} values, {skipped} skipped)"
    )
    return RestoreResult(
        course_id=course.id,
        shortname=course.shortname,
        modules_restored=len(backup.modules),
        values_restored=restored,
        values_skipped=skipped,
    )
