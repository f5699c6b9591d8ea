from .base import Base, metadata
from .auth import User, CourseMember
from .course import Course, CourseModule
from .customfield import CustomFieldCategory, CustomFieldField, CustomFieldData

# Import all models to ensure relationships are properly set up
from . import (
    auth,
    course,
    customfield,
)

__all__ = [
    'Base',
    'metadata',
    # Auth models
    'User',
    'CourseMember',
    # Course models
    'Course',
    'CourseModule',
    # Custom field models
    'CustomFieldCategory',
    'CustomFieldField',
    'CustomFieldData',
]
