from datetime import datetime, timezone
from decimal import Decimal
from typing import Optional
from pydantic import BaseModel, Field

BACKUP_FORMAT_VERSION = 1


class FieldValueBackup(BaseModel):
    """Raw stored columns of one custom field value."""
    type: str
    intvalue: Optional[int] = None
    decvalue: Optional[Decimal] = None
    charvalue: Optional[str] = None
    value: str = ""
    valueformat: int = 0


class CourseModuleBackup(BaseModel):
    id: int
    modname: str
    name: str
    intro: Optional[str] = None
    visible: bool = True
    customfields: dict[str, FieldValueBackup] = Field(default_factory=dict)


class CourseBackup(BaseModel):
    format_version: int = BACKUP_FORMAT_VERSION
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    course_id: int
    shortname: str
    fullname: str
    summary: Optional[str] = None
    summaryformat: int = 0
    customfields: dict[str, FieldValueBackup] = Field(default_factory=dict)
    modules: list[CourseModuleBackup] = Field(default_factory=list)


class RestoreResult(BaseModel):
    course_id: int
    shortname: str
    modules_restored: int
    values_restored: int
    values_skipped: int
