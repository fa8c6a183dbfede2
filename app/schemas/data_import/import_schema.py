from pydantic import BaseModel
from typing import Any, Dict, List, Optional
from datetime import datetime

from app.models.shared.enums import ImportCollection

class ImportTextRequest(BaseModel):
    """Raw JSON text pasted instead of uploaded"""
    content: str

class ImportResult(BaseModel):
    collection: ImportCollection
    received: int
    written: int
    skipped: int
    skipped_indexes: List[int] = []

class StagedImportResponse(BaseModel):
    collection: ImportCollection
    count: int
    source: Optional[str] = None
    staged_at: datetime
    records: List[Dict[str, Any]]
