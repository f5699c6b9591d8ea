"""
Custom field handlers for the two areas the resource library filters on.

A handler owns the fields of one area (courses or course modules) and reads
and writes their values for a given instance id.
"""

import logging
from typing import Any, Iterable, Mapping, Optional

from sqlalchemy.orm import Session

from resourcelibrary_backend.customfield.fields import (
    VALUE_COLUMNS,
    display_value,
    form_element_name,
    to_storage,
)
from resourcelibrary_backend.exceptions import ConflictException, NotFoundException
from resourcelibrary_backend.model.customfield import (
    CustomFieldCategory,
    CustomFieldData,
    CustomFieldField,
)
from resourcelibrary_backend.schemas.backup import FieldValueBackup
from resourcelibrary_backend.schemas.customfields import (
    CategoryCreate,
    FieldArea,
    FieldCreate,
    FieldDefinition,
    FieldType,
)

logger = logging.getLogger(__name__)


class CustomFieldHandler:
    """
    Base handler. Subclasses set ``area``.

    Attributes:
        area: Category area the handler's fields live in
    """

    area: FieldArea = None

    def __init__(self, db: Session):
        self.db = db

    # ========================================================================
    # Field definitions
    # ========================================================================

    def create_category(self, category: CategoryCreate) -> CustomFieldCategory:
        db_category = CustomFieldCategory(
            name=category.name,
            area=self.area.value,
            sortorder=category.sortorder,
        )
        self.db.add(db_category)
        self.db.flush()
        logger.info(f"Created custom field category '{category.name}' in area {self.area.value}")
        return db_category

    def create_field(self, field: FieldCreate) -> FieldDefinition:
        """
        Create a field in one of this area's categories.

        Raises:
            NotFoundException: If the category does not exist in this area
            ConflictException: If the shortname is already used in this area
        """
        category = self.db.query(CustomFieldCategory).filter(
            CustomFieldCategory.id == field.categoryid,
            CustomFieldCategory.area == self.area.value,
        ).first()
        if category is None:
            raise NotFoundException(detail=f"Custom field category {field.categoryid} not found in area {self.area.value}")

        if self._query_fields().filter(CustomFieldField.shortname == field.shortname).first() is not None:
            raise ConflictException(
                detail=f"Custom field shortname '{field.shortname}' already exists",
                context={"area": self.area.value, "shortname": field.shortname},
            )

        db_field = CustomFieldField(
            categoryid=category.id,
            shortname=field.shortname,
            name=field.name or field.shortname,
            type=field.type.value,
            description=field.description,
            configdata=dict(field.configdata),
            sortorder=field.sortorder,
        )
        self.db.add(db_field)
        self.db.flush()
        logger.info(f"Created {field.type.value} custom field '{field.shortname}' in area {self.area.value}")
        return FieldDefinition.model_validate(db_field)

    def _query_fields(self):
        return (
            self.db.query(CustomFieldField)
            .join(CustomFieldCategory, CustomFieldField.categoryid == CustomFieldCategory.id)
            .filter(CustomFieldCategory.area == self.area.value)
        )

    def get_fields(self) -> list[FieldDefinition]:
        fields = self._query_fields().order_by(
            CustomFieldCategory.sortorder,
            CustomFieldCategory.id,
            CustomFieldField.sortorder,
            CustomFieldField.id,
        ).all()
        return [FieldDefinition.model_validate(field) for field in fields]

    def get_field_by_shortname(self, shortname: str) -> Optional[FieldDefinition]:
        field = self._query_fields().filter(CustomFieldField.shortname == shortname).first()
        return FieldDefinition.model_validate(field) if field is not None else None

    # ========================================================================
    # Instance data
    # ========================================================================

    def _get_data_rows(self, instance_ids: Iterable[int], fields: list[FieldDefinition]) -> list[CustomFieldData]:
        field_ids = [field.id for field in fields]
        instance_ids = list(instance_ids)
        if not field_ids or not instance_ids:
            return []
        return self.db.query(CustomFieldData).filter(
            CustomFieldData.fieldid.in_(field_ids),
            CustomFieldData.instanceid.in_(instance_ids),
        ).all()

    def _save_value(self, field: FieldDefinition, instance_id: int, columns: Mapping[str, Any]) -> None:
        data = self.db.query(CustomFieldData).filter(
            CustomFieldData.fieldid == field.id,
            CustomFieldData.instanceid == instance_id,
        ).first()
        if data is None:
            data = CustomFieldData(fieldid=field.id, instanceid=instance_id, value="", valueformat=0)
            self.db.add(data)
        for column, value in columns.items():
            setattr(data, column, value)

    def instance_form_save(self, instance_id: int, data: Mapping[str, Any]) -> int:
        """
        Store the custom field values present in ``data``.

        Values are read from ``customfield_<shortname>``; long text fields also
        accept ``customfield_<shortname>_editor`` as ``{"text", "format"}``.

        Returns:
            Number of stored values
        """
        saved = 0
        for field in self.get_fields():
            key = form_element_name(field.shortname)
            if field.type == FieldType.TEXTAREA and f"{key}_editor" in data:
                key = f"{key}_editor"
            if key not in data:
                continue

            columns = to_storage(field, data[key])
            if columns is None:
                logger.warning(
                    f"Ignoring invalid value for {field.type.value} field '{field.shortname}' "
                    f"on {self.area.value} {instance_id}"
                )
                continue
            self._save_value(field, instance_id, columns)
            saved += 1

        self.db.flush()
        logger.debug(f"Saved {saved} custom field values for {self.area.value} {instance_id}")
        return saved

    def export_instance_data(self, instance_id: int) -> dict[str, FieldValueBackup]:
        """Raw stored columns per shortname, for backup."""
        fields = {field.id: field for field in self.get_fields()}
        values = {}
        for row in self._get_data_rows([instance_id], list(fields.values())):
            field = fields[row.fieldid]
            values[field.shortname] = FieldValueBackup(
                type=field.type.value,
                **{column: getattr(row, column) for column in VALUE_COLUMNS},
            )
        return values

    def export_instances_data_object(self, instance_ids: Iterable[int]) -> dict[int, dict[str, str]]:
        """Display values per instance id, then per shortname."""
        fields = {field.id: field for field in self.get_fields()}
        exported: dict[int, dict[str, str]] = {}
        for row in self._get_data_rows(instance_ids, list(fields.values())):
            field = fields[row.fieldid]
            exported.setdefault(row.instanceid, {})[field.shortname] = display_value(field, row)
        return exported

    def export_instance_data_object(self, instance_id: int) -> dict[str, str]:
        return self.export_instances_data_object([instance_id]).get(instance_id, {})

    def delete_instance(self, instance_id: int) -> int:
        field_ids = [field.id for field in self.get_fields()]
        if not field_ids:
            return 0
        deleted = self.db.query(CustomFieldData).filter(
            CustomFieldData.fieldid.in_(field_ids),
            CustomFieldData.instanceid == instance_id,
        ).delete(synchronize_session=False)
        logger.debug(f"Deleted {deleted} custom field values of {self.area.value} {instance_id}")
        return deleted

    def restore_instance_data(self, instance_id: int, values: Mapping[str, FieldValueBackup]) -> tuple[int, int]:
        """
        Restore backed up values by shortname.

        Values whose shortname does not exist here, or exists with another
        type, are skipped.

        Returns:
            Tuple of (restored, skipped)
        """
        fields = {field.shortname: field for field in self.get_fields()}
        restored = skipped = 0
        for shortname, value in values.items():
            field = fields.get(shortname)
            if field is None or field.type.value != value.type:
                logger.warning(
                    f"Skipping restore of custom field '{shortname}' on {self.area.value} {instance_id}: "
                    f"no matching {value.type} field on this site"
                )
                skipped += 1
                continue
            self._save_value(field, instance_id, value.model_dump(include=set(VALUE_COLUMNS)))
            restored += 1
        self.db.flush()
        return restored, skipped


class CourseHandler(CustomFieldHandler):
    area = FieldArea.COURSE


class CourseModuleHandler(CustomFieldHandler):
    area = FieldArea.COURSEMODULE
