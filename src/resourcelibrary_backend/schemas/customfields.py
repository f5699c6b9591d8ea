from enum import Enum
from typing import Any, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator


class FieldType(str, Enum):
    """Semantic type of a custom field. Each filter variant accepts exactly one."""
    TEXT = "text"
    CHECKBOX = "checkbox"
    DATE = "date"
    SELECT = "select"
    TEXTAREA = "textarea"


class FieldArea(str, Enum):
    COURSE = "course"
    COURSEMODULE = "coursemodule"


SHORTNAME_PATTERN = r"^[a-z0-9_]+$"


class CategoryCreate(BaseModel):
    name: str
    sortorder: int = 0


class FieldCreate(BaseModel):
    categoryid: int
    shortname: str = Field(..., pattern=SHORTNAME_PATTERN, max_length=100)
    name: Optional[str] = None
    type: FieldType
    description: Optional[str] = None
    configdata: dict[str, Any] = Field(default_factory=dict)
    sortorder: int = 0


class FieldDefinition(BaseModel):
    """Read-only view of a custom field, as handed to filters."""
    id: int
    shortname: str
    name: str
    type: FieldType
    configdata: dict[str, Any] = Field(default_factory=dict)
    categoryid: Optional[int] = None
    sortorder: int = 0

    model_config = ConfigDict(from_attributes=True, frozen=True)

    @field_validator('configdata', mode='before')
    @classmethod
    def none_to_empty(cls, value):
        return value or {}

    def get_configdata_property(self, name: str) -> Any:
        return self.configdata.get(name)

    def get_options(self) -> list[str]:
        """Options of a select field, in storage order (stored index is 1-based)."""
        options = self.get_configdata_property('options') or ""
        if isinstance(options, list):
            return [str(option) for option in options]
        return [line.strip() for line in str(options).splitlines() if line.strip()]
