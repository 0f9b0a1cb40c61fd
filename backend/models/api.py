"""Pydantic models for the relay HTTP surface."""
from pydantic import BaseModel


class ChatResponse(BaseModel):
    message: str


class ErrorResponse(BaseModel):
    error: str


class HealthResponse(BaseModel):
    status: str
    hasApiKey: bool
