from typing import Any

from pydantic import BaseModel, Field


class ToolResponse(BaseModel):
    """Result of one tool call. Always well formed; failures set is_error."""
    is_error: bool = Field(default=False, serialization_alias="isError")
    text: str = ""
    error: str | None = None  # error class, e.g. "MissingArgument"
    data: dict[str, Any] | None = None

    @classmethod
    def ok(cls, text: str, **data: Any) -> "ToolResponse":
        return cls(text=text, data=data or None)

    @classmethod
    def fail(cls, error: str, text: str) -> "ToolResponse":
        return cls(is_error=True, error=error, text=text)

    def to_payload(self) -> dict[str, Any]:
        """
        Return the JSON shape sent to MCP clients.

        Successful calls carry their fields under "data"; failures carry the error
        class under "error". Both carry "success", "isError" and a human-readable
        "message".
        """
        payload: dict[str, Any] = {
            "success": not self.is_error,
            "isError": self.is_error,
            "message": self.text,
        }
        if self.is_error:
            payload["error"] = self.error
        else:
            payload["data"] = self.data or {}
        return payload
