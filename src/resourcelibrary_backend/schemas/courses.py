from typing import Any, Optional
from pydantic import BaseModel, ConfigDict, Field


class CourseCreate(BaseModel):
    """
    Course creation payload.

    Custom field values are passed alongside the course attributes under
    their form names (``customfield_<shortname>``), hence ``extra='allow'``.
    """
    shortname: str = Field(..., min_length=1, max_length=255)
    fullname: str = Field(..., min_length=1)
    summary: Optional[str] = None
    summaryformat: int = 0

    model_config = ConfigDict(extra='allow')

    def customfield_data(self) -> dict[str, Any]:
        return {
            key: value
            for key, value in (self.model_extra or {}).items()
            if key.startswith("customfield_")
        }


class CourseModuleCreate(BaseModel):
    course: int
    modname: str = "label"
    name: Optional[str] = None
    intro: Optional[str] = None
    visible: bool = True

    model_config = ConfigDict(extra='allow')

    def customfield_data(self) -> dict[str, Any]:
        return {
            key: value
            for key, value in (self.model_extra or {}).items()
            if key.startswith("customfield_")
        }
