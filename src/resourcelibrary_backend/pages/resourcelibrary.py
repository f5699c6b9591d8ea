"""
Resource library page.

Chooses the site-wide library (list of courses) or the library of one
course (list of its modules) from the requested course id, then hands the
chosen renderable to the renderer.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Mapping, Optional

from sqlalchemy.orm import Session

from resourcelibrary_backend.output import (
    ActivityResourceLibrary,
    CourseResourceLibrary,
    ResourceLibraryRenderer,
)
from resourcelibrary_backend.permissions.auth import require_login
from resourcelibrary_backend.permissions.principal import Principal
from resourcelibrary_backend.settings import settings

logger = logging.getLogger(__name__)

STR_RESOURCELIBRARY = "Resource library"
STR_COURSERESOURCELIBRARY = "Course resource library"

CONTEXT_SYSTEM = "system"
CONTEXT_COURSE = "course"


@dataclass
class NavbarItem:
    text: str
    url: str
    key: str
    type: str = "custom"


@dataclass
class RequestContext:
    """Everything a page needs from the current request."""
    db: Session
    principal: Principal
    formdata: Mapping[str, Any] = field(default_factory=dict)
    renderer: ResourceLibraryRenderer = field(default_factory=ResourceLibraryRenderer)


@dataclass
class ResourceLibraryPage:
    context_level: str
    courseid: int
    url: str
    title: str
    heading: str
    renderable: Any
    navbar: list[NavbarItem] = field(default_factory=list)


def build_resource_library_page(ctx: RequestContext, courseid: Optional[int] = None) -> ResourceLibraryPage:
    """
    Build the page for ``courseid`` (the site when omitted).

    Access failures from ``require_login`` propagate unchanged.
    """
    if courseid is None:
        courseid = settings.SITE_ID

    require_login(ctx.db, ctx.principal, courseid)

    pageparams = {}
    if courseid != settings.SITE_ID:
        pageparams['courseid'] = courseid
        context_level = CONTEXT_COURSE
        renderable = ActivityResourceLibrary(ctx.db, courseid, ctx.formdata)
    else:
        context_level = CONTEXT_SYSTEM
        renderable = CourseResourceLibrary(ctx.db, ctx.formdata)

    page = ResourceLibraryPage(
        context_level=context_level,
        courseid=courseid,
        url=ctx.renderer.library_url(**pageparams),
        title=STR_RESOURCELIBRARY,
        heading=STR_RESOURCELIBRARY,
        renderable=renderable,
    )

    if courseid != settings.SITE_ID:
        page.navbar.insert(0, NavbarItem(
            text=STR_COURSERESOURCELIBRARY,
            url=ctx.renderer.library_url(),
            key='mainlibrary',
        ))

    logger.debug(f"Resource library page for {context_level} {courseid} (user {ctx.principal.user_id})")
    return page


def render_resource_library_page(ctx: RequestContext, courseid: Optional[int] = None) -> str:
    page = build_resource_library_page(ctx, courseid)
    body = ctx.renderer.render(page.renderable)
    return ctx.renderer.render_page(page, body)
