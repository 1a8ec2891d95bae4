"""Input variants — one validated shape per logical kind of request.

Callers hand the engine plain dicts. ``parse_input`` picks the variant by
the ``type`` tag and validates it. Nothing here rejects input: a field
that fails validation is dropped and its default used instead. An
unknown tag falls through to the generic variant and is kept as given;
a missing one reads "generic".
"""

from __future__ import annotations

from typing import Any, ClassVar, Literal

from pydantic import BaseModel, Field

from synergos.validation import validate_leniently


class CognitiveInput(BaseModel):
    """Fields every input kind may carry. Also the catch-all variant."""

    type: str = "generic"
    text: str | None = None
    dialog: bool = False
    dialog_state: str | None = Field(None, alias="dialogState")
    turn_count: int | None = Field(None, alias="turnCount")
    requires_response: bool = Field(False, alias="requiresResponse")
    timestamp: float | None = None

    # Whether this kind carries a user message (activates intent nodes)
    carries_message: ClassVar[bool] = False

    model_config = {"populate_by_name": True, "extra": "allow"}


class MessageInput(CognitiveInput):
    """A user utterance."""

    type: Literal["message"] = "message"
    carries_message: ClassVar[bool] = True


class DialogOptimizationRequest(CognitiveInput):
    """Ask for a better dialog flow."""

    type: Literal["dialog_optimization"] = "dialog_optimization"
    dialog: bool = True
    dialog_flow: dict[str, Any] = Field(default_factory=dict, alias="dialogFlow")
    user_intent: str | None = Field(None, alias="userIntent")
    context: Any = None


class OrchestrationAnalysisRequest(CognitiveInput):
    """Ask for orchestration recommendations on a bot project."""

    type: Literal["orchestration_analysis"] = "orchestration_analysis"
    project_id: str | None = Field(None, alias="projectId")
    bot_schema: Any = Field(None, alias="botSchema")
    current_dialog: Any = Field(None, alias="currentDialog")


class AdaptiveResponseRequest(CognitiveInput):
    """A user message to answer with conversation history and persona."""

    type: Literal["adaptive_response"] = "adaptive_response"
    conversation_history: list[Any] = Field(default_factory=list, alias="conversationHistory")
    bot_personality: Any = Field(None, alias="botPersonality")
    context: Any = None
    carries_message: ClassVar[bool] = True


class ModelIntegrationNotice(CognitiveInput):
    """A language model was attached to or detached from the bot."""

    type: Literal["model_integration"] = "model_integration"
    model_id: str | None = Field(None, alias="modelId")
    provider: str | None = None
    status: str | None = None

    model_config = {"protected_namespaces": ()}


INPUT_TYPES: dict[str, type[CognitiveInput]] = {
    "message": MessageInput,
    "dialog_optimization": DialogOptimizationRequest,
    "orchestration_analysis": OrchestrationAnalysisRequest,
    "adaptive_response": AdaptiveResponseRequest,
    "model_integration": ModelIntegrationNotice,
}


def parse_input(raw: Any) -> CognitiveInput:
    """Turn whatever the caller sent into a validated input variant."""
    if isinstance(raw, CognitiveInput):
        return raw
    if not isinstance(raw, dict):
        return CognitiveInput()

    kind = raw.get("type")
    cls = INPUT_TYPES.get(kind, CognitiveInput) if isinstance(kind, str) else CognitiveInput
    data = dict(raw)
    if not isinstance(kind, str):
        data.pop("type", None)

    parsed = validate_leniently(cls, data)
    return parsed if parsed is not None else cls()
