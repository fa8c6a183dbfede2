import json
import logging
from typing import Any, Dict, List, Optional, Union

from app.core.config import settings
from app.core.exceptions import ImportValidationError

logger = logging.getLogger(__name__)

JSON_CONTENT_TYPES = {"application/json", "text/json"}


def check_import_file(filename: Optional[str], content_type: Optional[str], size: int):
    """Reject anything that is not a JSON upload of acceptable size"""
    name = (filename or "").lower()
    is_json_name = any(name.endswith(ext) for ext in settings.ALLOWED_IMPORT_EXTENSIONS)
    if not (is_json_name or (content_type or "").lower() in JSON_CONTENT_TYPES):
        raise ImportValidationError("Please upload a valid JSON file.")
    if size > settings.MAX_IMPORT_FILE_SIZE:
        raise ImportValidationError(
            f"File is too large. Maximum size is {settings.MAX_IMPORT_FILE_SIZE // (1024 * 1024)} MB."
        )


def load_json(raw: Union[str, bytes]) -> Any:
    if isinstance(raw, bytes):
        try:
            raw = raw.decode("utf-8-sig")
        except UnicodeDecodeError:
            raise ImportValidationError("Could not parse the JSON file.")
    try:
        return json.loads(raw)
    except (json.JSONDecodeError, TypeError) as e:
        logger.warning(f"Rejected import payload: {e}")
        raise ImportValidationError("Could not parse the JSON file.")


def parse_import_payload(raw: Union[str, bytes], expected_key: str) -> List[Dict[str, Any]]:
    """Return the records held under `expected_key`, or fail without side effects"""
    data = load_json(raw)
    if not isinstance(data, dict) or not isinstance(data.get(expected_key), list):
        raise ImportValidationError(f"Invalid JSON structure. Missing '{expected_key}' array.")

    records = data[expected_key]
    if not all(isinstance(item, dict) for item in records):
        raise ImportValidationError(f"Invalid JSON structure. Every '{expected_key}' entry must be an object.")
    return records


def parse_org_payload(raw: Union[str, bytes]) -> List[Dict[str, Any]]:
    """Org data comes either as a bare array of employee rows or as {"employees": [...]}"""
    data = load_json(raw)
    if isinstance(data, dict) and isinstance(data.get("employees"), list):
        data = data["employees"]
    if not isinstance(data, list):
        raise ImportValidationError("JSON data is not an array.")
    if not all(isinstance(item, dict) for item in data):
        raise ImportValidationError("Invalid JSON structure. Every employee entry must be an object.")
    return data
