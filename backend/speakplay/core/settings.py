"""
Speech settings and runtime configuration.

Tolerance is the user-facing "speech match strictness" slider: the maximum
edit distance allowed for a fuzzy phrase match.
"""

import os
import re
from dataclasses import dataclass
from typing import Final

MIN_TOLERANCE: Final[int] = 0
MAX_TOLERANCE: Final[int] = 3


def _env_tolerance(name: str, default: int) -> int:
    raw = os.environ.get(name, "")
    try:
        value = int(raw) if raw.strip() else default
    except ValueError:
        value = default
    return max(MIN_TOLERANCE, min(value, MAX_TOLERANCE))


DEFAULT_TOLERANCE: Final[int] = _env_tolerance("SPEAKPLAY_DEFAULT_TOLERANCE", 1)
# Route of the Phrase Rainbow screen. Navigating back here re-creates the carousel.
RAINBOW_BASE_PATH: Final[str] = os.environ.get("SPEAKPLAY_RAINBOW_PATH", "/play/phrase-rainbow")

TOLERANCE_DESCRIPTIONS = (
    "Exact match only",
    "Small mispronunciations allowed",
    "Moderate flexibility",
    "Very relaxed matching",
)


def base_path_pattern(base_path: str) -> "re.Pattern[str]":
    """Match base_path with or without a trailing slash, anywhere at the end of a path."""
    return re.compile(re.escape(base_path.rstrip("/")) + r"/?$")


def validate_tolerance(value: int) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"Tolerance must be an integer, got {value!r}")
    if not MIN_TOLERANCE <= value <= MAX_TOLERANCE:
        raise ValueError(f"Tolerance must be between {MIN_TOLERANCE} and {MAX_TOLERANCE}, got {value}")
    return value


def describe_tolerance(value: int) -> str:
    if 0 <= value < len(TOLERANCE_DESCRIPTIONS):
        return TOLERANCE_DESCRIPTIONS[value]
    return "Custom sensitivity"


@dataclass
class SpeechSettings:
    """Live speech settings shared by every game screen."""

    tolerance: int = DEFAULT_TOLERANCE

    def __post_init__(self) -> None:
        validate_tolerance(self.tolerance)

    def set_tolerance(self, value: int) -> int:
        self.tolerance = validate_tolerance(value)
        return self.tolerance

    @property
    def description(self) -> str:
        return describe_tolerance(self.tolerance)


speech_settings = SpeechSettings()
