"""
In-memory registry of game sessions.
Single process; no auth. Each session pairs the game state with a mirror of the
client's recognizer so match-triggered transcript clears reach the client.
"""

import uuid
from dataclasses import dataclass
from typing import Sequence

from ..services.recognizer import ClientRecognizer
from .catalog import GIFT_PROMPTS, GIFTS, RAINBOW_SCENES
from .completion import CompletionTracker, Scene
from .playground import Gift, GiftPlayground, VoicePrompt
from .settings import RAINBOW_BASE_PATH


@dataclass
class CarouselSession:
    """One Phrase Rainbow carousel opened by a client."""

    carousel_id: str
    tracker: CompletionTracker
    recognizer: ClientRecognizer


@dataclass
class PlaygroundSession:
    """One What's in the Box table opened by a client."""

    playground_id: str
    playground: GiftPlayground
    recognizer: ClientRecognizer


# carousel_id -> CarouselSession, playground_id -> PlaygroundSession
_carousels: dict[str, CarouselSession] = {}
_playgrounds: dict[str, PlaygroundSession] = {}


def create_carousel(
    scenes: Sequence[Scene] | None = None,
    base_path: str = RAINBOW_BASE_PATH,
    recognizer: ClientRecognizer | None = None,
) -> CarouselSession:
    """Create a carousel over the given scenes (default: the built-in Phrase Rainbow)."""
    recognizer = recognizer or ClientRecognizer()
    tracker = CompletionTracker(
        RAINBOW_SCENES if scenes is None else scenes,
        request_clear=recognizer.request_reset,
        base_path=base_path,
    )
    session = CarouselSession(carousel_id=str(uuid.uuid4()), tracker=tracker, recognizer=recognizer)
    _carousels[session.carousel_id] = session
    return session


def get_carousel(carousel_id: str) -> CarouselSession | None:
    return _carousels.get(carousel_id)


def create_playground(
    gifts: Sequence[Gift] | None = None,
    prompts: Sequence[VoicePrompt] | None = None,
    recognizer: ClientRecognizer | None = None,
) -> PlaygroundSession:
    """Create a gift table (default: the built-in gifts and prompts)."""
    recognizer = recognizer or ClientRecognizer()
    playground = GiftPlayground(
        GIFTS if gifts is None else gifts,
        GIFT_PROMPTS if prompts is None else prompts,
        request_clear=recognizer.request_reset,
    )
    session = PlaygroundSession(
        playground_id=str(uuid.uuid4()), playground=playground, recognizer=recognizer
    )
    _playgrounds[session.playground_id] = session
    return session


def get_playground(playground_id: str) -> PlaygroundSession | None:
    return _playgrounds.get(playground_id)


def remove_carousel(carousel_id: str) -> CarouselSession | None:
    return _carousels.pop(carousel_id, None)


def remove_playground(playground_id: str) -> PlaygroundSession | None:
    return _playgrounds.pop(playground_id, None)


def clear_all() -> None:
    _carousels.clear()
    _playgrounds.clear()
