import logging
from typing import Any, Dict, List
from fastapi import APIRouter, Depends, File, HTTPException, UploadFile, status
from sqlalchemy.ext.asyncio import AsyncSession
from app.api.dependencies import require_menu_access
from app.core.database import get_async_session
from app.models.auth.account import LoginAccount
from app.models.shared.enums import ImportCollection
from app.schemas.data_import.import_schema import ImportResult, ImportTextRequest, StagedImportResponse
from app.services.data_import.field_mapping import transform_employee_record
from app.services.data_import.import_service import ImportService
from app.services.data_import.parser import check_import_file, parse_import_payload, parse_org_payload
from app.services.data_import.staging import staging_area

router = APIRouter()
logger = logging.getLogger(__name__)

can_import = require_menu_access("/kpi-import")

async def _read_upload(file: UploadFile) -> bytes:
    content = await file.read()
    check_import_file(file.filename, file.content_type, len(content))
    return content

def _parse_collection(collection: ImportCollection, raw) -> List[Dict[str, Any]]:
    return parse_import_payload(raw, collection.value)

def _staged_response(entry: Dict[str, Any]) -> StagedImportResponse:
    return StagedImportResponse(
        collection=entry["collection"],
        count=len(entry["records"]),
        source=entry["source"],
        staged_at=entry["staged_at"],
        records=entry["records"],
    )

@router.post("/organization", response_model=ImportResult)
async def import_organization(
    file: UploadFile = File(...),
    session: AsyncSession = Depends(get_async_session),
    current_account: LoginAccount = Depends(can_import)
):
    """Import an org chart (bare array or {"employees": [...]}); Thai headers are remapped"""
    raw = await _read_upload(file)
    records = [transform_employee_record(r) for r in parse_org_payload(raw)]
    service = ImportService(session)
    return await service.write_batch(ImportCollection.EMPLOYEES, records, actor_id=current_account.id)

@router.post("/{collection}/upload", response_model=ImportResult)
async def import_file(
    collection: ImportCollection,
    file: UploadFile = File(...),
    session: AsyncSession = Depends(get_async_session),
    current_account: LoginAccount = Depends(can_import)
):
    """Parse an uploaded JSON file and write it straight into the collection"""
    raw = await _read_upload(file)
    service = ImportService(session)
    records = service.prepare_records(collection, _parse_collection(collection, raw))
    return await service.write_batch(collection, records, actor_id=current_account.id)

@router.post("/{collection}/text", response_model=ImportResult)
async def import_text(
    collection: ImportCollection,
    data: ImportTextRequest,
    session: AsyncSession = Depends(get_async_session),
    current_account: LoginAccount = Depends(can_import)
):
    """Same as upload, for pasted JSON text"""
    service = ImportService(session)
    records = service.prepare_records(collection, _parse_collection(collection, data.content))
    return await service.write_batch(collection, records, actor_id=current_account.id)

@router.post("/{collection}/stage", response_model=StagedImportResponse)
async def stage_file(
    collection: ImportCollection,
    file: UploadFile = File(...),
    session: AsyncSession = Depends(get_async_session),
    current_account: LoginAccount = Depends(can_import)
):
    """Parse and hold the records for preview; nothing is written yet"""
    raw = await _read_upload(file)
    service = ImportService(session)
    records = service.prepare_records(collection, _parse_collection(collection, raw))
    entry = staging_area.stage(current_account.id, collection, records, source=file.filename)
    logger.info(f"Staged {len(records)} {collection.value} records for {current_account.id}")
    return _staged_response(entry)

@router.get("/{collection}/staged", response_model=StagedImportResponse)
async def get_staged(
    collection: ImportCollection,
    current_account: LoginAccount = Depends(can_import)
):
    """Preview of the staged records"""
    entry = staging_area.get(current_account.id, collection)
    if entry is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Nothing staged for {collection.value}")
    return _staged_response(entry)

@router.post("/{collection}/staged/commit", response_model=ImportResult)
async def commit_staged(
    collection: ImportCollection,
    session: AsyncSession = Depends(get_async_session),
    current_account: LoginAccount = Depends(can_import)
):
    """Write the staged records, then clear the staging slot"""
    entry = staging_area.get(current_account.id, collection)
    if entry is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Nothing staged for {collection.value}")
    service = ImportService(session)
    result = await service.write_batch(collection, entry["records"], actor_id=current_account.id)
    staging_area.discard(current_account.id, collection)
    return result

@router.delete("/{collection}/staged")
async def discard_staged(
    collection: ImportCollection,
    current_account: LoginAccount = Depends(can_import)
):
    """Drop the staged records"""
    discarded = staging_area.discard(current_account.id, collection)
    return {"discarded": discarded, "collection": collection.value}
