import logging

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware

from .core.completion import CompletionTracker, Scene
from .core.playground import Gift, GiftPlayground, VoicePrompt
from .core.settings import RAINBOW_BASE_PATH, speech_settings
from .core.speech import normalize_transcript, phrases_match
from .core.store import (
    CarouselSession,
    PlaygroundSession,
    create_carousel,
    create_playground,
    get_carousel,
    get_playground,
    remove_carousel,
    remove_playground,
)
from .core.targets import TargetSpec, resolve_target
from .models.speech import (
    AdvanceRequest,
    CarouselCreateRequest,
    CarouselStateResponse,
    CarouselTranscriptResponse,
    ClosedResponse,
    MatchRequest,
    MatchResponse,
    NavigateRequest,
    NavigateResponse,
    NormalizeRequest,
    NormalizeResponse,
    PlaygroundCreateRequest,
    PlaygroundStateResponse,
    PlaygroundTranscriptResponse,
    RecognizerReport,
    ReorderRequest,
    ResolveRequest,
    ResolveResponse,
    RotateRequest,
    SceneOut,
    SpeechSettingsBody,
    SpeechSettingsResponse,
    TargetIn,
    TranscriptRequest,
)
from .services.recognizer import ClientRecognizer

logger = logging.getLogger(__name__)

app = FastAPI(title="Speakplay Backend")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _target(body: TargetIn) -> TargetSpec:
    try:
        return TargetSpec(kind=body.kind, item_id=body.item_id)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e


def _tolerance(value: int | None) -> int:
    return speech_settings.tolerance if value is None else value


def _carousel_or_404(carousel_id: str) -> CarouselSession:
    session = get_carousel(carousel_id)
    if not session:
        raise HTTPException(status_code=404, detail="Carousel not found")
    return session


def _playground_or_404(playground_id: str) -> PlaygroundSession:
    session = get_playground(playground_id)
    if not session:
        raise HTTPException(status_code=404, detail="Playground not found")
    return session


def _report_recognizer(recognizer: ClientRecognizer, payload: RecognizerReport) -> None:
    recognizer.report(
        listening=payload.listening,
        supports_recognition=payload.supports_recognition,
        supports_continuous=payload.supports_continuous,
        microphone_available=payload.microphone_available,
    )


def _carousel_state(session: CarouselSession) -> CarouselStateResponse:
    tracker: CompletionTracker = session.tracker
    active = tracker.active_scene
    scenes = []
    for scene in tracker.scenes:
        scenes.append(
            SceneOut(
                id=scene.id,
                prompt=scene.prompt,
                state=tracker.scene_state(scene.id).value,
                listen_state=tracker.listen_state(scene.id).value,
            )
        )
    return CarouselStateResponse(
        carousel_id=session.carousel_id,
        instance_id=tracker.instance_id,
        active_index=tracker.active_index,
        active_scene_id=active.id if active else None,
        direction=tracker.direction,
        completed=tracker.completed(),
        scenes=scenes,
        listening=session.recognizer.listening,
        microphone_warning=session.recognizer.microphone_warning(),
    )


def _playground_state(session: PlaygroundSession) -> PlaygroundStateResponse:
    playground: GiftPlayground = session.playground
    return PlaygroundStateResponse(
        playground_id=session.playground_id,
        order=playground.order,
        rotations=dict(playground.rotations),
        open_gift_id=playground.open_gift_id,
        last_prompt_id=playground.last_prompt_id,
        last_prompt_label=playground.last_prompt_label,
        status_message=session.recognizer.status_message(),
        listening=session.recognizer.listening,
    )


@app.post("/speech/normalize", response_model=NormalizeResponse)
async def normalize(payload: NormalizeRequest) -> NormalizeResponse:
    return NormalizeResponse(tokens=normalize_transcript(payload.text))


@app.post("/speech/match", response_model=MatchResponse)
async def match(payload: MatchRequest) -> MatchResponse:
    """Check whether the transcript ends with (or contains) one of the phrases."""
    tolerance = _tolerance(payload.tolerance)
    return MatchResponse(
        matched=phrases_match(payload.transcript, payload.phrases, tolerance),
        tolerance=tolerance,
    )


@app.get("/settings/speech", response_model=SpeechSettingsResponse)
async def read_speech_settings() -> SpeechSettingsResponse:
    return SpeechSettingsResponse(
        tolerance=speech_settings.tolerance, description=speech_settings.description
    )


@app.put("/settings/speech", response_model=SpeechSettingsResponse)
async def update_speech_settings(payload: SpeechSettingsBody) -> SpeechSettingsResponse:
    """Set the speech match strictness (0 = exact, 3 = very relaxed)."""
    speech_settings.set_tolerance(payload.tolerance)
    logger.info("Speech tolerance set to %s", speech_settings.tolerance)
    return SpeechSettingsResponse(
        tolerance=speech_settings.tolerance, description=speech_settings.description
    )


@app.post("/targets/resolve", response_model=ResolveResponse)
async def resolve(payload: ResolveRequest) -> ResolveResponse:
    """Resolve a prompt target against the given live order. null means nothing to act on."""
    return ResolveResponse(item_id=resolve_target(_target(payload.target), payload.order))


@app.post("/carousels", response_model=CarouselStateResponse)
async def start_carousel(payload: CarouselCreateRequest) -> CarouselStateResponse:
    """Open a Phrase Rainbow carousel and start listening."""
    scenes = None
    if payload.scenes is not None:
        scenes = [
            Scene(id=s.id, prompt=s.prompt, phrase_variants=tuple(s.phrase_variants), variant=s.variant)
            for s in payload.scenes
        ]
    session = create_carousel(scenes=scenes, base_path=payload.base_path or RAINBOW_BASE_PATH)
    await session.recognizer.start()
    return _carousel_state(session)


@app.get("/carousels/{carousel_id}", response_model=CarouselStateResponse)
async def read_carousel(carousel_id: str) -> CarouselStateResponse:
    return _carousel_state(_carousel_or_404(carousel_id))


@app.post("/carousels/{carousel_id}/transcript", response_model=CarouselTranscriptResponse)
async def carousel_transcript(carousel_id: str, payload: TranscriptRequest) -> CarouselTranscriptResponse:
    """
    Feed the client's current transcript to the active scene.

    reset_transcript tells the client to clear its recognizer (after a match).
    """
    session = _carousel_or_404(carousel_id)
    session.recognizer.report(transcript=payload.transcript)
    outcome = session.tracker.handle_transcript(payload.transcript, _tolerance(payload.tolerance))
    reset = session.recognizer.take_pending_reset()
    return CarouselTranscriptResponse(
        outcome=outcome.value,
        reset_transcript=reset,
        state=_carousel_state(session),
    )


@app.post("/carousels/{carousel_id}/advance", response_model=CarouselStateResponse)
async def advance_carousel(carousel_id: str, payload: AdvanceRequest) -> CarouselStateResponse:
    """Swipe to the next or previous scene. The scene being left loses its completion."""
    session = _carousel_or_404(carousel_id)
    try:
        session.tracker.advance(payload.direction)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    return _carousel_state(session)


@app.post("/carousels/{carousel_id}/navigate", response_model=NavigateResponse)
async def navigate_carousel(carousel_id: str, payload: NavigateRequest) -> NavigateResponse:
    """Report a route change. Coming back to the carousel screen starts it over."""
    session = _carousel_or_404(carousel_id)
    reentered = session.tracker.navigate(payload.path)
    reset = session.recognizer.take_pending_reset()
    return NavigateResponse(
        reentered=reentered,
        reset_transcript=reset,
        state=_carousel_state(session),
    )


@app.post("/carousels/{carousel_id}/recognizer", response_model=CarouselStateResponse)
async def report_carousel_recognizer(carousel_id: str, payload: RecognizerReport) -> CarouselStateResponse:
    session = _carousel_or_404(carousel_id)
    _report_recognizer(session.recognizer, payload)
    return _carousel_state(session)


@app.delete("/carousels/{carousel_id}", response_model=ClosedResponse)
async def close_carousel(carousel_id: str) -> ClosedResponse:
    """Leave the carousel: stop listening and forget its state."""
    session = _carousel_or_404(carousel_id)
    await session.recognizer.stop()
    remove_carousel(carousel_id)
    return ClosedResponse(id=carousel_id, listening=session.recognizer.listening)


@app.post("/playgrounds", response_model=PlaygroundStateResponse)
async def start_playground(payload: PlaygroundCreateRequest) -> PlaygroundStateResponse:
    """Open a What's in the Box table and start listening."""
    gifts = None
    if payload.gifts is not None:
        gifts = [Gift(id=g.id, title=g.title, prize_label=g.prize_label) for g in payload.gifts]
    prompts = None
    if payload.prompts is not None:
        prompts = [
            VoicePrompt(
                id=p.id,
                label=p.label,
                phrase_variants=tuple(p.phrase_variants),
                target=_target(p.target),
            )
            for p in payload.prompts
        ]
    session = create_playground(gifts=gifts, prompts=prompts)
    await session.recognizer.start()
    return _playground_state(session)


@app.get("/playgrounds/{playground_id}", response_model=PlaygroundStateResponse)
async def read_playground(playground_id: str) -> PlaygroundStateResponse:
    return _playground_state(_playground_or_404(playground_id))


@app.post("/playgrounds/{playground_id}/transcript", response_model=PlaygroundTranscriptResponse)
async def playground_transcript(
    playground_id: str, payload: TranscriptRequest
) -> PlaygroundTranscriptResponse:
    """Open the gift named in the transcript, if any prompt was heard."""
    session = _playground_or_404(playground_id)
    session.recognizer.report(transcript=payload.transcript)
    prompt = session.playground.handle_transcript(payload.transcript, _tolerance(payload.tolerance))
    reset = session.recognizer.take_pending_reset()
    return PlaygroundTranscriptResponse(
        prompt_id=prompt.id if prompt else None,
        reset_transcript=reset,
        state=_playground_state(session),
    )


@app.post("/playgrounds/{playground_id}/reorder", response_model=PlaygroundStateResponse)
async def reorder_gift(playground_id: str, payload: ReorderRequest) -> PlaygroundStateResponse:
    session = _playground_or_404(playground_id)
    try:
        session.playground.move_gift(payload.gift_id, payload.to_index)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    return _playground_state(session)


@app.post("/playgrounds/{playground_id}/rotate", response_model=PlaygroundStateResponse)
async def rotate_gift(playground_id: str, payload: RotateRequest) -> PlaygroundStateResponse:
    session = _playground_or_404(playground_id)
    try:
        session.playground.rotate_gift(payload.gift_id, payload.delta)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    return _playground_state(session)


@app.post("/playgrounds/{playground_id}/close", response_model=PlaygroundStateResponse)
async def close_gifts(playground_id: str) -> PlaygroundStateResponse:
    session = _playground_or_404(playground_id)
    session.playground.close_gifts()
    return _playground_state(session)


@app.post("/playgrounds/{playground_id}/restart", response_model=PlaygroundTranscriptResponse)
async def restart_listening(playground_id: str) -> PlaygroundTranscriptResponse:
    """Clear the transcript and start the recognizer again."""
    session = _playground_or_404(playground_id)
    await session.recognizer.reset()
    await session.recognizer.start()
    return PlaygroundTranscriptResponse(
        prompt_id=None,
        reset_transcript=session.recognizer.take_pending_reset(),
        state=_playground_state(session),
    )


@app.post("/playgrounds/{playground_id}/recognizer", response_model=PlaygroundStateResponse)
async def report_recognizer(playground_id: str, payload: RecognizerReport) -> PlaygroundStateResponse:
    """The client reports its recognizer's capabilities; the status message follows them."""
    session = _playground_or_404(playground_id)
    _report_recognizer(session.recognizer, payload)
    return _playground_state(session)


@app.delete("/playgrounds/{playground_id}", response_model=ClosedResponse)
async def close_playground(playground_id: str) -> ClosedResponse:
    """Leave the gift table: stop listening and forget its state."""
    session = _playground_or_404(playground_id)
    await session.recognizer.stop()
    remove_playground(playground_id)
    return ClosedResponse(id=playground_id, listening=session.recognizer.listening)


if __name__ == "__main__":
    import uvicorn

    logging.basicConfig(level=logging.INFO)
    uvicorn.run(app, host="0.0.0.0", port=8000)
