from pydantic import BaseModel


class HealthResponse(BaseModel):
    """Response model for the health check endpoint."""

    status: str


class ErrorResponse(BaseModel):
    """Error payload returned by the lookup endpoint."""

    code: str
    message: str
    provider: str | None = None
