from dataclasses import dataclass
from pydantic import BaseModel, ConfigDict, Field
from typing import Any, Dict, List, Literal, Optional


Role = Literal["user", "assistant", "system", "tool"]


class ChatMessage(BaseModel):
    role: Role
    content: str
    tool_call_id: Optional[str] = None
    name: Optional[str] = None


class ChatOptions(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    model: Optional[str] = None
    max_tokens: Optional[int] = Field(None, alias="maxTokens", gt=0)
    temperature: Optional[float] = Field(None, ge=0.0, le=2.0)


class ChatRequest(BaseModel):
    messages: List[ChatMessage] = Field(..., min_length=1, description="Conversation history, oldest first")
    options: ChatOptions = Field(default_factory=ChatOptions)


class StreamChunk(BaseModel):
    """One server-sent event on the /chat stream."""

    model_config = ConfigDict(populate_by_name=True)

    text: Optional[str] = None
    error: Optional[str] = None
    is_complete: bool = Field(False, alias="isComplete")

    @staticmethod
    def delta(text: str) -> "StreamChunk":
        return StreamChunk(text=text, is_complete=False)

    @staticmethod
    def complete() -> "StreamChunk":
        return StreamChunk(text="", is_complete=True)

    @staticmethod
    def failure(error: str) -> "StreamChunk":
        return StreamChunk(error=error, is_complete=True)

    def to_sse(self) -> str:
        return f"data: {self.model_dump_json(by_alias=True, exclude_none=True)}\n\n"


@dataclass(frozen=True)
class ToolDescriptor:
    name: str
    description: str
    parameters: Dict[str, Any]

    @property
    def required(self) -> frozenset:
        return frozenset(self.parameters.get("required", []))

    def to_openai(self) -> Dict[str, Any]:
        return {
            "type": "function",
            "function": {
                "name": self.name,
                "description": self.description,
                "parameters": self.parameters,
            },
        }


@dataclass
class PendingToolCall:
    """Tool call being rebuilt from stream fragments sharing one index."""

    index: int
    id: str = ""
    function_name: str = ""
    arguments_json: str = ""

    def to_message(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "type": "function",
            "function": {"name": self.function_name, "arguments": self.arguments_json},
        }


@dataclass(frozen=True)
class ToolResult:
    tool_call_id: str
    content: str

    def to_message(self) -> Dict[str, Any]:
        return {"role": "tool", "tool_call_id": self.tool_call_id, "content": self.content}


class ToolExecutionResult(BaseModel):
    success: bool
    data: Any = None
    error: Optional[str] = None

    @staticmethod
    def ok(data: Any) -> "ToolExecutionResult":
        return ToolExecutionResult(success=True, data=data)

    @staticmethod
    def failure(error: str) -> "ToolExecutionResult":
        return ToolExecutionResult(success=False, error=error)


class SocialIntegration(BaseModel):
    """A user's connection to one social platform, as stored."""

    model_config = ConfigDict(extra="ignore")

    id: str
    user_id: str
    platform: str
    platform_user_id: Optional[str] = None
    platform_username: Optional[str] = None
    platform_email: Optional[str] = None
    access_token: Optional[str] = Field(None, repr=False)
    refresh_token: Optional[str] = Field(None, repr=False)
    token_expires_at: Optional[str] = None
    scopes: Optional[List[str]] = None
    is_active: bool = False
    connection_status: str = "disconnected"
    last_sync_at: Optional[str] = None
    last_authenticated_at: Optional[str] = None
    last_error: Optional[str] = None
    created_at: Optional[str] = None
