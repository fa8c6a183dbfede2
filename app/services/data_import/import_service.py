import logging
from typing import Any, Dict, List, Optional, Type

from fastapi import HTTPException, status
from sqlalchemy import Float, Integer
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import ImportValidationError
from app.core.logging import log_user_action
from app.core.write_errors import write_error_channel
from app.db.base import BaseModel
from app.models.hr.employee import Employee
from app.models.kpi.kpi import Kpi
from app.models.kpi.monthly_kpi import MonthlyKpi
from app.models.organization.department import Department
from app.models.organization.position import Position
from app.models.organization.role_definition import RoleDefinition
from app.models.shared.enums import ImportCollection
from app.services.data_import.field_mapping import transform_employee_record

logger = logging.getLogger(__name__)

COLLECTION_MODELS: Dict[ImportCollection, Type[BaseModel]] = {
    ImportCollection.KPI_CATALOG: Kpi,
    ImportCollection.DEPARTMENTS: Department,
    ImportCollection.POSITIONS: Position,
    ImportCollection.ROLES: RoleDefinition,
    ImportCollection.EMPLOYEES: Employee,
    ImportCollection.MONTHLY_KPIS: MonthlyKpi,
}

# camelCase keys seen in exported files
FIELD_ALIASES = {
    "strategicObjective": "strategic_objective",
    "parentKpiId": "parent_kpi_id",
}

SYSTEM_FIELDS = {"id", "created_at", "updated_at", "extra_fields", "createdAt", "updatedAt"}


class ImportService:
    def __init__(self, session: AsyncSession):
        self.session = session

    # ---------- Record shaping ----------
    @staticmethod
    def _model_fields(model: Type[BaseModel]) -> Dict[str, Any]:
        return {
            name: column
            for name, column in model.__table__.columns.items()
            if name not in SYSTEM_FIELDS
        }

    @staticmethod
    def _coerce(column, value: Any, index: int, field: str) -> Any:
        if value is None or value == "":
            return None
        if isinstance(column.type, (Float, Integer)):
            try:
                number = float(str(value).replace(",", ""))
            except ValueError:
                raise ImportValidationError(f"Record {index}: '{field}' must be numeric, got '{value}'.")
            return int(number) if isinstance(column.type, Integer) else number
        return value if isinstance(value, (str, list, dict)) else str(value)

    def _split_record(self, model: Type[BaseModel], record: Dict[str, Any], index: int) -> Dict[str, Any]:
        fields = self._model_fields(model)
        values: Dict[str, Any] = {}
        extra: Dict[str, Any] = dict(record.get("extra_fields") or {})
        for key, value in record.items():
            if key in SYSTEM_FIELDS:
                continue
            field = FIELD_ALIASES.get(key, key)
            if field in fields:
                values[field] = self._coerce(fields[field], value, index, field)
            else:
                extra[key] = value
        if "extra_fields" in model.__table__.columns and extra:
            values["extra_fields"] = extra

        # NOT NULL columns: fall back to the column default, else the record is malformed
        for field, column in fields.items():
            if column.nullable or values.get(field) is not None:
                continue
            if column.default is not None:
                values.pop(field, None)
                continue
            raise ImportValidationError(f"Record {index}: '{field}' is required.")
        return values

    def prepare_records(self, collection: ImportCollection, records: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        """Normalize raw rows before staging or writing"""
        if collection == ImportCollection.EMPLOYEES:
            return [transform_employee_record(r, generate_missing_id=False) for r in records]
        return records

    # ---------- Batch write ----------
    async def write_batch(
        self,
        collection: ImportCollection,
        records: List[Dict[str, Any]],
        actor_id: Optional[str] = None,
    ) -> Dict[str, Any]:
        """
        Merge records into a collection in a single transaction.

        Records without an `id` are skipped and logged. A shaping error on any
        record aborts the batch before anything is written.
        """
        model = COLLECTION_MODELS[collection]
        prepared: List[tuple] = []
        skipped_indexes: List[int] = []

        for index, record in enumerate(records):
            raw_id = record.get("id")
            doc_id = str(raw_id).strip() if raw_id not in (None, "") else ""
            if not doc_id:
                logger.warning(f"Skipping {collection.value} record {index}: missing 'id'")
                skipped_indexes.append(index)
                continue
            prepared.append((doc_id, self._split_record(model, record, index)))

        try:
            batch: Dict[str, BaseModel] = {}
            for doc_id, values in prepared:
                document = batch.get(doc_id) or await self.session.get(model, doc_id)
                if document is None:
                    document = model(id=doc_id, **values)
                    self.session.add(document)
                else:
                    for field, value in values.items():
                        if field == "extra_fields":
                            value = {**(document.extra_fields or {}), **value}
                        setattr(document, field, value)
                batch[doc_id] = document

            await self.session.commit()
        except HTTPException:
            raise
        except Exception as e:
            await self.session.rollback()
            write_error_channel.report(collection.value, "batch_write", e, actor_id=actor_id)
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail=f"Error writing {collection.value} batch"
            )

        written = len(batch)
        log_user_action(actor_id or "system", "import", collection.value, f"{written} records")
        logger.info(
            f"Imported {written} {collection.value} records ({len(skipped_indexes)} skipped)"
        )
        return {
            "collection": collection,
            "received": len(records),
            "written": written,
            "skipped": len(skipped_indexes),
            "skipped_indexes": skipped_indexes,
        }
