import threading
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Tuple

from app.models.shared.enums import ImportCollection


class ImportStagingArea:
    """
    Parsed import payloads held per login until they are committed or discarded.

    This is transient state: it lives in process memory and is lost on restart.
    """

    def __init__(self):
        self._staged: Dict[Tuple[str, ImportCollection], Dict[str, Any]] = {}
        self._lock = threading.Lock()

    def stage(self, account_id: str, collection: ImportCollection, records: List[Dict[str, Any]], source: Optional[str] = None) -> Dict[str, Any]:
        entry = {
            "collection": collection,
            "records": records,
            "source": source,
            "staged_at": datetime.now(timezone.utc),
        }
        with self._lock:
            self._staged[(account_id, collection)] = entry
        return entry

    def get(self, account_id: str, collection: ImportCollection) -> Optional[Dict[str, Any]]:
        with self._lock:
            return self._staged.get((account_id, collection))

    def pop(self, account_id: str, collection: ImportCollection) -> Optional[Dict[str, Any]]:
        with self._lock:
            return self._staged.pop((account_id, collection), None)

    def discard(self, account_id: str, collection: ImportCollection) -> bool:
        return self.pop(account_id, collection) is not None


staging_area = ImportStagingArea()
