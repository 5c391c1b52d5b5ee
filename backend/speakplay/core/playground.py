"""
What's in the Box: voice prompts open gifts the child can drag and spin.

Reordering and voice matching are independent streams. They only share the
live gift order, which is swapped under its own short lock, so a drag never
waits on phrase matching and the other way round.
"""

import logging
import threading
from dataclasses import dataclass
from typing import Callable, Sequence

from .speech import phrases_match
from .targets import TargetSpec, reorder_list, resolve_target

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Gift:
    id: str
    title: str
    prize_label: str = ""


@dataclass(frozen=True)
class VoicePrompt:
    """A sentence the child can say, and which gift it opens."""

    id: str
    label: str
    phrase_variants: Sequence[str]
    target: TargetSpec


class GiftPlayground:
    def __init__(
        self,
        gifts: Sequence[Gift],
        prompts: Sequence[VoicePrompt],
        request_clear: Callable[[], None] | None = None,
    ):
        self.gifts: dict[str, Gift] = {gift.id: gift for gift in gifts}
        self.prompts: list[VoicePrompt] = list(prompts)
        self._request_clear = request_clear
        self._order: list[str] = [gift.id for gift in gifts]
        self._order_lock = threading.Lock()
        self._lock = threading.RLock()
        self.rotations: dict[str, float] = {gift.id: 0.0 for gift in gifts}
        self.open_gift_id: str | None = None
        self.last_prompt_id: str | None = None

    @property
    def order(self) -> list[str]:
        """Snapshot of the live gift order."""
        with self._order_lock:
            return list(self._order)

    def _check_gift(self, gift_id: str) -> None:
        if gift_id not in self.gifts:
            raise ValueError(f"Unknown gift: {gift_id!r}")

    def handle_transcript(self, transcript: str, tolerance: int) -> VoicePrompt | None:
        """
        Open the gift named by the first prompt heard in the transcript.

        Prompts whose target cannot be resolved (empty order, or a gift that is
        not on the table) are skipped. Returns the prompt that fired, if any.
        """
        if not transcript:
            return None
        with self._lock:
            for prompt in self.prompts:
                if not phrases_match(transcript, prompt.phrase_variants, tolerance):
                    continue
                target_id = resolve_target(prompt.target, self.order)
                if target_id is None or target_id not in self.gifts:
                    logger.debug("Prompt %s heard but target %s is not available", prompt.id, target_id)
                    continue
                self.open_gift_id = target_id
                self.last_prompt_id = prompt.id
                logger.info("Prompt %s opened gift %s", prompt.id, target_id)
                if self._request_clear is not None:
                    self._request_clear()
                return prompt
            return None

    def move_gift(self, gift_id: str, to_index: int) -> list[str]:
        """Drag a gift to a new slot; out-of-range slots are clamped to the ends."""
        self._check_gift(gift_id)
        with self._order_lock:
            to_index = max(0, min(to_index, len(self._order) - 1))
            from_index = self._order.index(gift_id)
            if from_index != to_index:
                self._order = reorder_list(self._order, from_index, to_index)
                logger.debug("Moved gift %s from %d to %d", gift_id, from_index, to_index)
            return list(self._order)

    def rotate_gift(self, gift_id: str, delta: float) -> float:
        """Two-finger spin: accumulate rotation (radians) for one gift."""
        self._check_gift(gift_id)
        with self._lock:
            self.rotations[gift_id] = self.rotations.get(gift_id, 0.0) + delta
            return self.rotations[gift_id]

    def close_gifts(self) -> None:
        with self._lock:
            self.open_gift_id = None

    @property
    def last_prompt_label(self) -> str | None:
        for prompt in self.prompts:
            if prompt.id == self.last_prompt_id:
                return prompt.label
        return None
