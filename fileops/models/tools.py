"""Models for the tool catalog and the tool call envelope."""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field


class ToolDefinition(BaseModel):
    """A tool advertised to callers."""

    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(..., description="Tool name used in calls")
    description: str = Field(..., description="What the tool does")
    input_schema: dict[str, Any] = Field(
        ...,
        alias="inputSchema",
        description="JSON schema of the tool arguments",
    )


class ToolListResponse(BaseModel):
    """Response payload for the tool catalog."""

    tools: list[ToolDefinition]


class ToolCallRequest(BaseModel):
    """Request body for a tool invocation."""

    name: str = Field(..., description="Tool to invoke")
    arguments: dict[str, Any] = Field(default_factory=dict, description="Tool arguments")


class ToolContent(BaseModel):
    """One content item of a tool result."""

    type: Literal["text"] = "text"
    text: str


class ToolCallResponse(BaseModel):
    """Envelope wrapping every tool result, successful or not."""

    model_config = ConfigDict(populate_by_name=True)

    content: list[ToolContent]
    is_error: bool = Field(False, alias="isError")

    @classmethod
    def text(cls, text: str, is_error: bool = False) -> ToolCallResponse:
        return cls(content=[ToolContent(text=text)], is_error=is_error)
