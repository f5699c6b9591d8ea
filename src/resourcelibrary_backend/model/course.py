from sqlalchemy import (
    Boolean, Column, DateTime, ForeignKey, Index, Integer, String, Text, func
)
from sqlalchemy.orm import relationship

from .base import Base


class Course(Base):
    """Course model.

    The course with id ``settings.SITE_ID`` is the site itself and is never
    listed in the resource library.
    """
    __tablename__ = 'course'

    id = Column(Integer, primary_key=True, autoincrement=True)
    shortname = Column(String(255), nullable=False, unique=True)
    fullname = Column(String(1333), nullable=False)
    summary = Column(Text)
    summaryformat = Column(Integer, nullable=False, server_default="0")
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())

    # Relationships
    modules = relationship(
        'CourseModule',
        back_populates='course',
        cascade='all, delete-orphan',
        order_by='CourseModule.id',
    )
    members = relationship('CourseMember', back_populates='course', cascade='all, delete-orphan')


class CourseModule(Base):
    """An activity or resource inside a course (label, page, url...)."""
    __tablename__ = 'course_module'
    __table_args__ = (
        Index('course_module_course_key', 'course_id'),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    course_id = Column(Integer, ForeignKey('course.id', ondelete='CASCADE', onupdate='RESTRICT'), nullable=False)
    modname = Column(String(20), nullable=False)
    name = Column(String(1333), nullable=False)
    intro = Column(Text)
    visible = Column(Boolean, nullable=False, default=True, server_default="1")
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    # Relationships
    course = relationship('Course', back_populates='modules')
