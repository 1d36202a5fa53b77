"""
Conversation history for one orchestration run

Turns are tagged user / model / tool-result and rendered to the
OpenAI-style message list litellm expects (user / assistant / tool).
History is append-only and lives only as long as the request.
"""
from typing import List, Optional, Dict, Any, Literal, Tuple
from pydantic import BaseModel, ConfigDict, Field
import json

Role = Literal["user", "model", "tool-result"]

ROLE_TO_OPENAI = {
    "user": "user",
    "model": "assistant",
    "tool-result": "tool",
}


class FunctionCall(BaseModel):
    """A function call the model asked for"""
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    arguments: Dict[str, Any] = Field(default_factory=dict)

    def to_openai_format(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "type": "function",
            "function": {"name": self.name, "arguments": json.dumps(self.arguments)}
        }


class ConversationTurn(BaseModel):
    """Single turn in the conversation"""
    model_config = ConfigDict(frozen=True)

    role: Role
    content: Optional[str] = None

    # Model turns that request tools
    function_calls: Tuple[FunctionCall, ...] = ()

    # Tool-result turns
    tool_call_id: Optional[str] = None
    name: Optional[str] = None

    def to_openai_format(self) -> Dict[str, Any]:
        """Convert to OpenAI/litellm message format."""
        msg: Dict[str, Any] = {"role": ROLE_TO_OPENAI[self.role]}

        if self.content is not None or not self.function_calls:
            msg["content"] = self.content if self.content is not None else ""

        if self.function_calls:
            msg["tool_calls"] = [fc.to_openai_format() for fc in self.function_calls]

        if self.tool_call_id:
            msg["tool_call_id"] = self.tool_call_id

        if self.name:
            msg["name"] = self.name

        return msg


class ConversationHistory:
    """
    Append-only ordered sequence of turns.

    Key invariant: every tool-result turn follows the model turn that
    requested it, in the order the calls were requested.
    """

    def __init__(self, turns: Optional[List[ConversationTurn]] = None):
        self._turns: List[ConversationTurn] = list(turns or [])

    @property
    def turns(self) -> Tuple[ConversationTurn, ...]:
        return tuple(self._turns)

    def append(self, turn: ConversationTurn) -> None:
        self._turns.append(turn)

    def add_user_message(self, content: str) -> None:
        self.append(ConversationTurn(role="user", content=content))

    def add_model_message(
        self,
        content: Optional[str] = None,
        function_calls: Optional[List[FunctionCall]] = None
    ) -> None:
        self.append(ConversationTurn(
            role="model",
            content=content,
            function_calls=tuple(function_calls or ())
        ))

    def add_tool_result(self, tool_call_id: str, name: str, content: str) -> None:
        self.append(ConversationTurn(
            role="tool-result",
            content=content,
            tool_call_id=tool_call_id,
            name=name
        ))

    def to_openai_format(self, system_prompt: Optional[str] = None) -> List[Dict[str, Any]]:
        """
        Render the history as litellm messages.

        Args:
            system_prompt: Optional system instruction placed first
        """
        messages = []
        if system_prompt:
            messages.append({"role": "system", "content": system_prompt})
        messages.extend(turn.to_openai_format() for turn in self._turns)
        return messages

    def __len__(self) -> int:
        return len(self._turns)
