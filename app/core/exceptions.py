from fastapi import HTTPException, status

class BaseAppException(HTTPException):
    def __init__(self, status_code: int, detail: str):
        super().__init__(status_code=status_code, detail=detail)

class ValidationError(BaseAppException):
    def __init__(self, detail: str = "Validation error"):
        super().__init__(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=detail)

class NotFoundError(BaseAppException):
    def __init__(self, detail: str = "Resource not found"):
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=detail)

class ImportValidationError(ValidationError):
    """Malformed import payload: bad JSON, wrong file type or missing array field"""
    def __init__(self, detail: str = "Could not parse the JSON file."):
        super().__init__(detail=detail)

class PermissionDeniedError(BaseAppException):
    def __init__(self, detail: str = "Permission denied"):
        super().__init__(status_code=status.HTTP_403_FORBIDDEN, detail=detail)

class InvalidStatusTransitionError(BaseAppException):
    def __init__(self, detail: str = "Invalid status transition"):
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)

class AIGenerationError(BaseAppException):
    def __init__(self, detail: str = "Failed to generate content. Please try again."):
        super().__init__(status_code=status.HTTP_502_BAD_GATEWAY, detail=detail)
