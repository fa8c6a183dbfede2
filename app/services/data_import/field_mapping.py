import random
import string
from typing import Any, Dict, Optional

# Thai org-chart headers → internal employee fields
EMPLOYEE_FIELD_MAP = {
    "รหัส": "id",
    "ชื่อ-นามสกุล": "name",
    "แผนก": "department",
    "ตำแหน่ง": "position",
    "ผู้บังคับบัญชา": "manager",
}

EMPLOYEE_FIELD_DEFAULTS = {
    "name": "N/A",
    "department": "N/A",
    "position": "N/A",
    "manager": "",
}


def generate_employee_id() -> str:
    suffix = "".join(random.choices(string.ascii_lowercase + string.digits, k=9))
    return f"user-{suffix}"


def _stringify_id(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def transform_employee_record(raw: Dict[str, Any], generate_missing_id: bool = True) -> Dict[str, Any]:
    """
    Remap an org-chart row to the internal employee shape.

    Thai keys win over English ones. Numeric ids are stringified; a row with
    no id gets a generated `user-xxxxxxxxx` id unless generate_missing_id is False.
    """
    record: Dict[str, Any] = {}
    for thai_key, field in EMPLOYEE_FIELD_MAP.items():
        value = raw.get(thai_key)
        if value in (None, ""):
            value = raw.get(field)
        record[field] = value

    record["id"] = _stringify_id(record["id"])
    if record["id"] is None and generate_missing_id:
        record["id"] = generate_employee_id()

    for field, default in EMPLOYEE_FIELD_DEFAULTS.items():
        if record[field] in (None, ""):
            record[field] = default
        else:
            record[field] = str(record[field])

    known = set(EMPLOYEE_FIELD_MAP) | set(EMPLOYEE_FIELD_MAP.values())
    extra = {k: v for k, v in raw.items() if k not in known}
    if extra:
        record["extra_fields"] = extra
    return record
