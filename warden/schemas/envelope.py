"""Uniform response envelope returned by every endpoint."""

from typing import Generic, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")


class ApiResponse(BaseModel, Generic[T]):
    """
    {success, message, data} wrapper.

    Failures are reported with success=false and data=null; the HTTP status
    stays 200 so existing clients only inspect the body.
    """

    success: bool = Field(..., description="True when the operation completed")
    message: str = Field(default="", description="Human-readable outcome")
    data: T | None = Field(default=None, description="Payload on success")

    @classmethod
    def ok(cls, data: T | None = None, message: str = "OK") -> "ApiResponse[T]":
        return cls(success=True, message=message, data=data)

    @classmethod
    def fail(cls, message: str) -> "ApiResponse[T]":
        return cls(success=False, message=message, data=None)
