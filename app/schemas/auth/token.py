from typing import Dict, Optional
from pydantic import BaseModel

class TokenPayload(BaseModel):
    sub: Optional[str] = None  # login account id
    exp: Optional[int] = None
    type: Optional[str] = None
    role: Optional[str] = None
    menu_access: Dict[str, bool] = {}
    is_anonymous: bool = False
