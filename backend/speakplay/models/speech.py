from typing import Literal

from pydantic import BaseModel, Field


class NormalizeRequest(BaseModel):
    text: str


class NormalizeResponse(BaseModel):
    tokens: list[str]


class MatchRequest(BaseModel):
    """Check a transcript against one prompt's phrasings. Tolerance defaults to the speech setting."""

    transcript: str
    phrases: list[str]
    tolerance: int | None = Field(default=None, ge=0, le=3)


class MatchResponse(BaseModel):
    matched: bool
    tolerance: int


class SpeechSettingsBody(BaseModel):
    tolerance: int = Field(ge=0, le=3)


class SpeechSettingsResponse(BaseModel):
    tolerance: int
    description: str


class TargetIn(BaseModel):
    """Tagged target: a fixed item id, or the first/last item in the live order."""

    kind: Literal["item", "first", "last"]
    item_id: str | None = None


class ResolveRequest(BaseModel):
    target: TargetIn
    order: list[str]


class ResolveResponse(BaseModel):
    item_id: str | None


class SceneIn(BaseModel):
    id: int
    prompt: str
    phrase_variants: list[str]
    variant: str = "juice"


class CarouselCreateRequest(BaseModel):
    """Scenes default to the built-in Phrase Rainbow scenes."""

    scenes: list[SceneIn] | None = None
    base_path: str | None = None


class SceneOut(BaseModel):
    id: int
    prompt: str
    state: str  # IDLE | MATCHED
    listen_state: str  # LISTENING | AWAITING_CLEAR


class CarouselStateResponse(BaseModel):
    carousel_id: str
    instance_id: str
    active_index: int
    active_scene_id: int | None
    direction: int
    completed: dict[int, bool]
    scenes: list[SceneOut]
    listening: bool
    microphone_warning: str | None = None


class TranscriptRequest(BaseModel):
    """Current full transcript as reported by the client's recognizer."""

    transcript: str
    tolerance: int | None = Field(default=None, ge=0, le=3)


class CarouselTranscriptResponse(BaseModel):
    outcome: str
    reset_transcript: bool  # True when the client should clear its recognizer transcript
    state: CarouselStateResponse


class AdvanceRequest(BaseModel):
    direction: Literal[1, -1]


class NavigateRequest(BaseModel):
    path: str


class NavigateResponse(BaseModel):
    reentered: bool
    reset_transcript: bool
    state: CarouselStateResponse


class GiftIn(BaseModel):
    id: str
    title: str
    prize_label: str = ""


class PromptIn(BaseModel):
    id: str
    label: str
    phrase_variants: list[str]
    target: TargetIn


class PlaygroundCreateRequest(BaseModel):
    """Gifts and prompts default to the built-in What's in the Box set."""

    gifts: list[GiftIn] | None = None
    prompts: list[PromptIn] | None = None


class PlaygroundStateResponse(BaseModel):
    playground_id: str
    order: list[str]
    rotations: dict[str, float]
    open_gift_id: str | None
    last_prompt_id: str | None
    last_prompt_label: str | None
    status_message: str
    listening: bool


class PlaygroundTranscriptResponse(BaseModel):
    prompt_id: str | None
    reset_transcript: bool
    state: PlaygroundStateResponse


class ReorderRequest(BaseModel):
    gift_id: str
    to_index: int


class RotateRequest(BaseModel):
    gift_id: str
    delta: float


class RecognizerReport(BaseModel):
    """What the client's recognizer can do and is doing. Omitted fields are unchanged."""

    listening: bool | None = None
    supports_recognition: bool | None = None
    supports_continuous: bool | None = None
    microphone_available: bool | None = None


class ClosedResponse(BaseModel):
    id: str
    listening: bool
