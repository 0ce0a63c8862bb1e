from typing import Optional
from pydantic import BaseModel


class ErrorResponse(BaseModel):
    """Standard error response model"""
    message: str
    status_code: int


class StatusResponse(BaseModel):
    """Standard status response model"""
    status: str
    service: Optional[str] = None
    version: Optional[str] = None
