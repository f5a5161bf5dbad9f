"""Pydantic models for voice assistant tool-call webhooks."""

from pydantic import BaseModel, Field


class ToolFunction(BaseModel):
    """Function name and JSON-encoded arguments of a tool call."""

    name: str | None = None
    arguments: str | dict[str, object] | None = None


class ToolCall(BaseModel):
    """Single tool call requested by the voice assistant."""

    id: str
    function: ToolFunction | None = None


class ToolCallMessage(BaseModel):
    """Message envelope carrying tool calls."""

    tool_calls: list[ToolCall] = Field(default_factory=list, alias="toolCalls")


class ToolCallWebhook(BaseModel):
    """Tool-call webhook payload."""

    message: ToolCallMessage | None = None


class ToolCallResult(BaseModel):
    """Result returned for a single tool call."""

    tool_call_id: str = Field(serialization_alias="toolCallId")
    result: str
