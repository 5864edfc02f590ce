from typing import Any, Dict, Generic, List, Optional, TypeVar

from pydantic import BaseModel, Field

DataType = TypeVar("DataType")


class APIResponse(BaseModel, Generic[DataType]):
    """Success envelope wrapped around every endpoint's payload."""
    success: bool = True
    message: Optional[str] = None
    data: Optional[DataType] = None


class FieldError(BaseModel):
    field: str = Field(..., description="Dotted location of the offending input, e.g. sessions.0.trainer_id")
    message: str
    type: str


class ErrorResponse(BaseModel):
    """Failure envelope rendered by the exception handlers."""
    success: bool = False
    message: str
    error: str = Field(..., description="Machine-readable code such as NOT_FOUND or VALIDATION_ERROR")
    details: Optional[Dict[str, Any]] = None
    timestamp: str
    path: str
    request_id: Optional[str] = None

    @classmethod
    def validation_details(cls, errors: List[FieldError]) -> Dict[str, Any]:
        return {"validation_errors": [e.model_dump() for e in errors]}
