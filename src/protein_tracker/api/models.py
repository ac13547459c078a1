"""Pydantic models for the analysis endpoint payloads."""

from pydantic import BaseModel, ConfigDict, Field


class AnalyzeRequest(BaseModel):
    """Analysis request body; presence is checked by the service."""

    model_config = ConfigDict(populate_by_name=True)

    image: str | None = None
    api_key: str | None = Field(default=None, alias="apiKey")


class ErrorResponse(BaseModel):
    """Error body returned for any failed analysis."""

    error: str
