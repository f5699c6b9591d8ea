import logging
from typing import Annotated, Optional

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import HTMLResponse
from slowapi import Limiter
from slowapi.util import get_remote_address
from sqlalchemy.orm import Session

from resourcelibrary_backend.business_logic.backup import backup_course, restore_course
from resourcelibrary_backend.database import get_db
from resourcelibrary_backend.output import ResourceLibraryRenderer
from resourcelibrary_backend.pages.resourcelibrary import RequestContext, render_resource_library_page
from resourcelibrary_backend.permissions.auth import get_admin_principal, get_current_principal
from resourcelibrary_backend.permissions.principal import Principal
from resourcelibrary_backend.schemas.backup import CourseBackup, RestoreResult
from resourcelibrary_backend.settings import settings

resourcelibrary_router = APIRouter()
logger = logging.getLogger(__name__)

limiter = Limiter(key_func=get_remote_address)


@resourcelibrary_router.get("/resourcelibrary", response_class=HTMLResponse, name="resourcelibrary_page")
@limiter.limit(settings.RATE_LIMIT)
def resourcelibrary_page_endpoint(
    request: Request,
    permissions: Annotated[Principal, Depends(get_current_principal)],
    courseid: Optional[int] = Query(None),
    db: Session = Depends(get_db),
):
    ctx = RequestContext(
        db=db,
        principal=permissions,
        formdata=request.query_params,
        renderer=ResourceLibraryRenderer(base_url=request.url.path),
    )
    return HTMLResponse(render_resource_library_page(ctx, courseid))


@resourcelibrary_router.get("/resourcelibrary/courses/{course_id}/backup", response_model=CourseBackup)
def backup_course_endpoint(
    course_id: int,
    permissions: Annotated[Principal, Depends(get_admin_principal)],
    db: Session = Depends(get_db),
):
    return backup_course(db, course_id)


@resourcelibrary_router.post("/resourcelibrary/restore", response_model=RestoreResult, status_code=201)
def restore_course_endpoint(
    backup: CourseBackup,
    permissions: Annotated[Principal, Depends(get_admin_principal)],
    target_course_id: Optional[int] = Query(None),
    db: Session = Depends(get_db),
):
    result = restore_course(db, backup, target_course_id)
    logger.info(f"User {permissions.user_id} restored course {result.course_id}")
    return result
