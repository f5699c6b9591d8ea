from sqlalchemy import Boolean, Column, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import relationship

from .base import Base


class User(Base):
    __tablename__ = 'user'

    id = Column(Integer, primary_key=True, autoincrement=True)
    username = Column(String(255), nullable=False, unique=True)
    email = Column(String(320))
    given_name = Column(String(255))
    family_name = Column(String(255))
    is_admin = Column(Boolean, nullable=False, default=False, server_default="0")

    # Relationships
    course_members = relationship('CourseMember', back_populates='user', cascade='all, delete-orphan')


class CourseMember(Base):
    """Enrolment of a user in a course."""
    __tablename__ = 'course_member'
    __table_args__ = (
        UniqueConstraint('user_id', 'course_id', name='course_member_user_course_key'),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey('user.id', ondelete='CASCADE'), nullable=False)
    course_id = Column(Integer, ForeignKey('course.id', ondelete='CASCADE'), nullable=False)
    course_role_id = Column(String(255), nullable=False, default='_student')

    # Relationships
    user = relationship('User', back_populates='course_members')
    course = relationship('Course', back_populates='members')
