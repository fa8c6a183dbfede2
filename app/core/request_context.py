import uuid
from typing import Optional, Dict
from fastapi import Request

HDR_REQUEST_ID = "X-Request-Id"

def get_request_context(request: Request) -> Dict[str, Optional[str]]:
    """
    Endpoint, client address and user-agent of the request, plus a request id.
    The id is taken from the X-Request-Id header when the caller sends one,
    otherwise a fresh one is minted so every access log line can be correlated.
    """
    request_id = request.headers.get(HDR_REQUEST_ID) or uuid.uuid4().hex
    return {
        "endpoint": f"{request.method} {request.url.path}",
        "ip_address": request.client.host if request.client else None,
        "user_agent": request.headers.get("user-agent"),
        "request_id": request_id,
    }
