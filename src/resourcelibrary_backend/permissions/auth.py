"""
Authentication and course access checks.

Users are authenticated by the fronting proxy, which passes the username in
the ``settings.AUTH_USER_HEADER`` header. This module only resolves that user
and checks course access.
"""

import logging
from typing import Annotated

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from resourcelibrary_backend.database import get_db
from resourcelibrary_backend.exceptions import (
    AdminRequiredException,
    CourseAccessDeniedException,
    CourseNotFoundException,
    UnauthorizedException,
)
from resourcelibrary_backend.model.auth import CourseMember, User
from resourcelibrary_backend.model.course import Course
from resourcelibrary_backend.permissions.principal import Principal
from resourcelibrary_backend.settings import settings

logger = logging.getLogger(__name__)


def build_principal(db: Session, username: str) -> Principal:
    user = db.query(User).filter(User.username == username).first()
    if user is None:
        logger.warning(f"Unknown user '{username}' in authentication header")
        raise UnauthorizedException(detail="Unknown user")

    course_ids = {
        course_id
        for (course_id,) in db.query(CourseMember.course_id).filter(CourseMember.user_id == user.id)
    }
    return Principal(
        user_id=user.id,
        username=user.username,
        is_admin=bool(user.is_admin),
        course_ids=course_ids,
    )


def get_current_principal(request: Request, db: Session = Depends(get_db)) -> Principal:
    """FastAPI dependency resolving the authenticated user."""
    username = request.headers.get(settings.AUTH_USER_HEADER)
    if not username:
        raise UnauthorizedException()
    return build_principal(db, username)


def get_admin_principal(
    permissions: Annotated[Principal, Depends(get_current_principal)],
) -> Principal:
    if not permissions.is_admin:
        raise AdminRequiredException(user_id=str(permissions.user_id))
    return permissions


def require_login(db: Session, principal: Principal, course_id: int) -> Course:
    """
    Make sure the course exists and the principal may access it.

    Any authenticated user may access the site course.

    Raises:
        UnauthorizedException: If nobody is logged in
        CourseNotFoundException: If the course does not exist
        CourseAccessDeniedException: If the user is neither admin nor enrolled
    """
    principal.get_user_id_or_throw()

    course = db.query(Course).filter(Course.id == course_id).first()
    if course is None:
        raise CourseNotFoundException(
            detail=f"Course {course_id} not found",
            user_id=str(principal.user_id),
        )

    if course_id != settings.SITE_ID and not principal.can_access_course(course_id):
        raise CourseAccessDeniedException(
            user_id=str(principal.user_id),
            context={"course_id": course_id},
        )
    return course
