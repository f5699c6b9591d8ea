from typing import Optional
from pydantic import BaseModel, Field

from resourcelibrary_backend.exceptions import UnauthorizedException


class Principal(BaseModel):
    """Authenticated user and the courses they are enrolled in."""
    user_id: Optional[int] = None
    username: Optional[str] = None
    is_admin: bool = False
    course_ids: set[int] = Field(default_factory=set)

    @property
    def is_authenticated(self) -> bool:
        return self.user_id is not None

    def get_user_id_or_throw(self) -> int:
        if self.user_id is None:
            raise UnauthorizedException()
        return self.user_id

    def can_access_course(self, course_id: int) -> bool:
        return self.is_admin or course_id in self.course_ids
