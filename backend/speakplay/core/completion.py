"""
Per-scene completion state for the Phrase Rainbow carousel.

Scene flow: IDLE -> (phrase heard) -> MATCHED -> (scene left / screen re-entered) -> IDLE.

After a match we ask the recognizer to clear its transcript, but the clear is
asynchronous and the next update may still carry the old words. A scene that
just matched therefore waits in AWAITING_CLEAR and ignores every update until
it sees an empty transcript. An empty transcript releases every waiting
scene, not only the active one, since it is the same recognizer buffer.
"""

import enum
import logging
import threading
import uuid
from dataclasses import dataclass
from typing import Callable, Sequence

from .settings import RAINBOW_BASE_PATH, base_path_pattern
from .speech import phrases_match

logger = logging.getLogger(__name__)


class SceneState(str, enum.Enum):
    IDLE = "IDLE"
    MATCHED = "MATCHED"


class ListenState(str, enum.Enum):
    LISTENING = "LISTENING"
    # Match fired and a transcript clear was requested; waiting to observe it.
    AWAITING_CLEAR = "AWAITING_CLEAR"


class TranscriptOutcome(str, enum.Enum):
    IGNORED = "IGNORED"  # no active scene
    SUPPRESSED = "SUPPRESSED"
    CLEARED = "CLEARED"
    EMPTY = "EMPTY"
    UNCHANGED = "UNCHANGED"
    NO_MATCH = "NO_MATCH"
    MATCHED = "MATCHED"


@dataclass(frozen=True)
class Scene:
    """A carousel scene and the phrasings that complete it."""

    id: int
    prompt: str
    phrase_variants: Sequence[str]
    variant: str = "juice"


@dataclass
class SceneRecord:
    completed: bool = False
    last_seen: str = ""
    listen_state: ListenState = ListenState.LISTENING

    @property
    def state(self) -> SceneState:
        return SceneState.MATCHED if self.completed else SceneState.IDLE


def _new_instance_id() -> str:
    return uuid.uuid4().hex


class CompletionTracker:
    """
    Consumes transcript updates and navigation events for one carousel.

    request_clear is called (fire-and-forget) whenever the recognizer's
    transcript should be emptied. All state changes happen under one lock, so
    recognizer callbacks cannot interleave with a navigation reset.
    """

    def __init__(
        self,
        scenes: Sequence[Scene],
        request_clear: Callable[[], None] | None = None,
        base_path: str = RAINBOW_BASE_PATH,
    ):
        self.scenes: list[Scene] = list(scenes)
        self._request_clear = request_clear
        self._base_path = base_path_pattern(base_path)
        self._lock = threading.RLock()
        self._records: dict[int, SceneRecord] = {}
        self.instance_id = _new_instance_id()
        self.active_index = 0
        self.direction = 1
        self.path: str | None = None

    @property
    def active_scene(self) -> Scene | None:
        if not self.scenes:
            return None
        return self.scenes[min(self.active_index, len(self.scenes) - 1)]

    def record(self, scene_id: int) -> SceneRecord:
        with self._lock:
            return self._records.setdefault(scene_id, SceneRecord())

    def scene_state(self, scene_id: int) -> SceneState:
        with self._lock:
            record = self._records.get(scene_id)
            return record.state if record else SceneState.IDLE

    def listen_state(self, scene_id: int) -> ListenState:
        with self._lock:
            record = self._records.get(scene_id)
            return record.listen_state if record else ListenState.LISTENING

    def completed(self) -> dict[int, bool]:
        """SceneCompletion map: only scenes currently completed are present."""
        with self._lock:
            return {scene_id: True for scene_id, record in self._records.items() if record.completed}

    def _release_suppressed(self) -> None:
        for scene_id, record in self._records.items():
            if record.listen_state is ListenState.AWAITING_CLEAR:
                record.listen_state = ListenState.LISTENING
                record.last_seen = ""
                logger.debug("Scene %s listening again", scene_id)

    def _on_base_path(self, path: str | None) -> bool:
        return bool(path) and self._base_path.search(path) is not None

    def _clear_transcript(self) -> None:
        if self._request_clear is not None:
            self._request_clear()

    def handle_transcript(self, transcript: str, tolerance: int) -> TranscriptOutcome:
        """Process one transcript update for the active scene."""
        with self._lock:
            scene = self.active_scene
            if scene is None:
                return TranscriptOutcome.IGNORED

            record = self.record(scene.id)
            normalized = (transcript or "").strip().lower()

            if not normalized:
                # The recognizer has been cleared: no scene has stale words left.
                was_waiting = record.listen_state is ListenState.AWAITING_CLEAR
                self._release_suppressed()
                record.last_seen = ""
                return TranscriptOutcome.CLEARED if was_waiting else TranscriptOutcome.EMPTY

            if record.listen_state is ListenState.AWAITING_CLEAR:
                logger.debug("Scene %s ignoring stale transcript %r", scene.id, normalized)
                return TranscriptOutcome.SUPPRESSED

            if normalized == record.last_seen:
                return TranscriptOutcome.UNCHANGED

            record.last_seen = normalized
            if not phrases_match(normalized, scene.phrase_variants, tolerance):
                return TranscriptOutcome.NO_MATCH

            record.completed = True
            record.listen_state = ListenState.AWAITING_CLEAR
            logger.info("Scene %s matched %r (tolerance=%s)", scene.id, normalized, tolerance)
            self._clear_transcript()
            return TranscriptOutcome.MATCHED

    def advance(self, direction: int) -> Scene:
        """Swipe to the next (+1) or previous (-1) scene, wrapping around."""
        if direction not in (1, -1):
            raise ValueError(f"Direction must be 1 or -1, got {direction!r}")
        with self._lock:
            if not self.scenes:
                raise ValueError("Carousel has no scenes")
            leaving = self.active_scene
            self.direction = direction
            self.active_index = (self.active_index + direction) % len(self.scenes)
            if leaving is not None:
                record = self._records.get(leaving.id)
                if record is not None and record.completed:
                    record.completed = False
                    logger.debug("Cleared completion of scene %s on leave", leaving.id)
            return self.scenes[self.active_index]

    def navigate(self, path: str) -> bool:
        """
        Observe a route change. Returns True if it re-entered the carousel screen.

        Re-entry throws away every scene's state and gives the carousel a new
        instance id, exactly as if it had been built from scratch.
        """
        with self._lock:
            previous, self.path = self.path, path
            if not self._on_base_path(path) or self._on_base_path(previous):
                return False
            self.reset()
            logger.info("Carousel re-entered at %s; new instance %s", path, self.instance_id)
            self._clear_transcript()
            return True

    def reset(self) -> None:
        """Discard all per-scene state and start a fresh carousel instance."""
        with self._lock:
            self._records = {}
            self.active_index = 0
            self.direction = 1
            self.instance_id = _new_instance_id()
