from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, Field


EnvelopeStatus = Literal["success", "error", "quote_ready"]


class ResponseEnvelope(BaseModel):
    """The only shape the DEX tool ever returns to the calling agent."""

    status: EnvelopeStatus = Field(description="Outcome of the request")
    message: Optional[str] = Field(default=None, description="Human-readable message")
    summary: Any = Field(default=None, description="Reduced, readable view of the result")
    tokens: Optional[List[Dict[str, Any]]] = Field(default=None, description="First tokens of a token listing")
    details: Any = Field(default=None, description="Upstream error details")
    data: Any = Field(default=None, description="Upstream payload")

    @classmethod
    def success(cls, **kwargs: Any) -> "ResponseEnvelope":
        return cls(status="success", **kwargs)

    @classmethod
    def error(cls, message: str, details: Any = None) -> "ResponseEnvelope":
        return cls(status="error", message=message, details=details)

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump(exclude_none=True)

    def to_json(self) -> str:
        return self.model_dump_json(exclude_none=True)
