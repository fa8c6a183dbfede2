from fastapi import APIRouter, Depends, Query
from app.api.dependencies import require_admin
from app.core.write_errors import write_error_channel
from app.models.auth.account import LoginAccount
from app.schemas.system.write_error_schema import WriteErrorListResponse

router = APIRouter()

@router.get("/", response_model=WriteErrorListResponse)
async def get_write_errors(
    limit: int = Query(50, ge=1, le=500),
    current_account: LoginAccount = Depends(require_admin)
):
    """Recent failed writes, newest first"""
    errors = write_error_channel.recent(limit)
    return {"count": len(errors), "errors": errors}

@router.delete("/")
async def clear_write_errors(current_account: LoginAccount = Depends(require_admin)):
    write_error_channel.clear()
    return {"message": "Write errors cleared"}
