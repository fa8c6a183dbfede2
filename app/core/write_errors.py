import logging
import threading
from collections import deque
from datetime import datetime, timezone
from typing import Any, Deque, Dict, List, Optional

from app.core.config import settings

logger = logging.getLogger(__name__)


class WriteErrorChannel:
    """
    In-process record of failed store writes.

    Services report a failure here and then propagate the error to the caller,
    so a failed write is never silent: the caller gets an HTTP error and admins
    can read the recent failures back through the system endpoint.
    """

    def __init__(self, max_size: int = 200):
        self._errors: Deque[Dict[str, Any]] = deque(maxlen=max_size)
        self._lock = threading.Lock()

    def report(
        self,
        collection: str,
        operation: str,
        error: Exception,
        document_id: Optional[str] = None,
        actor_id: Optional[str] = None,
    ) -> Dict[str, Any]:
        entry = {
            "collection": collection,
            "operation": operation,
            "document_id": document_id,
            "actor_id": actor_id,
            "error": str(error) or type(error).__name__,
            "occurred_at": datetime.now(timezone.utc),
        }
        with self._lock:
            self._errors.append(entry)
        logger.error(
            f"Write failed: {operation} {collection}/{document_id or '*'} by {actor_id or 'system'}: {entry['error']}"
        )
        return entry

    def recent(self, limit: int = 50) -> List[Dict[str, Any]]:
        with self._lock:
            items = list(self._errors)
        return list(reversed(items))[:limit]

    def clear(self):
        with self._lock:
            self._errors.clear()

    def __len__(self) -> int:
        return len(self._errors)


write_error_channel = WriteErrorChannel(max_size=settings.WRITE_ERROR_BUFFER_SIZE)
