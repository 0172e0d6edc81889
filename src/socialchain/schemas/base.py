"""
Common response schemas shared by all routes.
"""

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """Body of every error response."""

    status: str = "error"
    code: str = Field(..., description="Machine readable error code", examples=["AUTHENTICATION_ERROR"])
    message: str = Field(..., description="Human readable message")


class HealthResponse(BaseModel):
    status: str
    app: str
    version: str
    environment: str
    database: str
