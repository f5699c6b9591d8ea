"""
Custom field storage.

Fields are grouped in categories; a category belongs to one area
(``course`` or ``coursemodule``). Each (field, instance) pair has at most
one data row. Which value column a field type uses is described in
``resourcelibrary_backend.customfield.fields``.
"""

from sqlalchemy import (
    BigInteger, CheckConstraint, Column, ForeignKey, Index, Integer, JSON,
    Numeric, String, Text, UniqueConstraint
)
from sqlalchemy.orm import relationship

from .base import Base


class CustomFieldCategory(Base):
    __tablename__ = 'customfield_category'
    __table_args__ = (
        CheckConstraint("area IN ('course', 'coursemodule')", name='ck_customfield_category_area'),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(400), nullable=False)
    area = Column(String(100), nullable=False)
    sortorder = Column(Integer, nullable=False, default=0)

    # Relationships
    fields = relationship(
        'CustomFieldField',
        back_populates='category',
        cascade='all, delete-orphan',
        order_by='CustomFieldField.sortorder',
    )


class CustomFieldField(Base):
    __tablename__ = 'customfield_field'
    __table_args__ = (
        CheckConstraint(
            "type IN ('text', 'checkbox', 'date', 'select', 'textarea')",
            name='ck_customfield_field_type',
        ),
        Index('customfield_field_category_key', 'categoryid'),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    categoryid = Column(Integer, ForeignKey('customfield_category.id', ondelete='CASCADE'), nullable=False)
    shortname = Column(String(100), nullable=False)
    name = Column(String(400), nullable=False)
    type = Column(String(100), nullable=False)
    description = Column(Text)
    configdata = Column(JSON, nullable=False, default=dict)
    sortorder = Column(Integer, nullable=False, default=0)

    # Relationships
    category = relationship('CustomFieldCategory', back_populates='fields')
    data = relationship('CustomFieldData', back_populates='field', cascade='all, delete-orphan')


class CustomFieldData(Base):
    __tablename__ = 'customfield_data'
    __table_args__ = (
        UniqueConstraint('instanceid', 'fieldid', name='customfield_data_instance_field_key'),
        Index('customfield_data_field_key', 'fieldid'),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    fieldid = Column(Integer, ForeignKey('customfield_field.id', ondelete='CASCADE'), nullable=False)
    instanceid = Column(Integer, nullable=False)
    intvalue = Column(BigInteger)
    decvalue = Column(Numeric(10, 5))
    charvalue = Column(String(1333))
    value = Column(Text, nullable=False, default="")
    valueformat = Column(Integer, nullable=False, default=0)

    # Relationships
    field = relationship('CustomFieldField', back_populates='data')
