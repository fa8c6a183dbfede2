from pydantic import BaseModel
from typing import List, Optional
from datetime import datetime

class WriteErrorResponse(BaseModel):
    collection: str
    operation: str
    document_id: Optional[str] = None
    actor_id: Optional[str] = None
    error: str
    occurred_at: datetime

class WriteErrorListResponse(BaseModel):
    count: int
    errors: List[WriteErrorResponse]
