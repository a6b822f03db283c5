# app/shared/schemas/common.py
from pydantic import BaseModel, Field
from typing import Any, Dict, Optional
from datetime import datetime

class BaseResponse(BaseModel):
    success: bool
    message: str = ""
    timestamp: datetime = Field(default_factory=datetime.now)

class ErrorResponse(BaseResponse):
    success: bool = False
    error_code: Optional[str] = None
    details: Optional[Dict[str, Any]] = None

class MutationResult(BaseModel):
    """Resumen de una operación de escritura"""
    affected_rows: int

class MutationResponse(BaseResponse):
    result: MutationResult
