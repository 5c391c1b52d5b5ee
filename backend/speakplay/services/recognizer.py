"""
Server-side mirror of the browser's speech recognizer.

Speech-to-text happens in the client. The client reports what the recognizer
can do and what it currently hears; the game logic asks for the transcript to
be cleared after a match. Every call here is best-effort: an unsupported
browser or a blocked microphone is logged and reflected in the status
message, never raised to the caller.
"""

import logging

logger = logging.getLogger(__name__)


class ClientRecognizer:
    """Tracks one client's recognizer: capabilities, listening flag, transcript."""

    def __init__(
        self,
        supports_recognition: bool = True,
        supports_continuous: bool = True,
        microphone_available: bool = True,
    ):
        self.supports_recognition = supports_recognition
        self.supports_continuous = supports_continuous
        self.microphone_available = microphone_available
        self.listening = False
        self.continuous = False
        self.transcript = ""
        # Set when the server wants the client to clear its transcript.
        self.pending_reset = False

    def report(
        self,
        transcript: str | None = None,
        listening: bool | None = None,
        supports_recognition: bool | None = None,
        supports_continuous: bool | None = None,
        microphone_available: bool | None = None,
    ) -> None:
        """Update from what the client says its recognizer is doing."""
        if transcript is not None:
            self.transcript = transcript
        if listening is not None:
            self.listening = listening
        if supports_recognition is not None:
            self.supports_recognition = supports_recognition
        if supports_continuous is not None:
            self.supports_continuous = supports_continuous
        if microphone_available is not None:
            self.microphone_available = microphone_available

    async def start(self, continuous: bool = True) -> None:
        if not self.supports_recognition:
            logger.warning("Speech recognition not supported; not starting")
            return
        if not self.microphone_available:
            logger.warning("Microphone unavailable; not starting recognizer")
            return
        if self.listening:
            return
        self.continuous = continuous and self.supports_continuous
        self.listening = True
        logger.debug("Recognizer started (continuous=%s)", self.continuous)

    async def stop(self) -> None:
        if not self.listening:
            return
        self.listening = False
        logger.debug("Recognizer stopped")

    async def reset(self) -> None:
        """Clear the accumulated transcript."""
        self.request_reset()

    def request_reset(self) -> None:
        """
        Ask for the transcript to be cleared without waiting for it.

        The clear itself happens in the client, which picks the request up
        from take_pending_reset() on its next call.
        """
        self.transcript = ""
        self.pending_reset = True
        logger.debug("Recognizer transcript reset requested")

    def take_pending_reset(self) -> bool:
        """Return and clear the pending reset flag."""
        pending = self.pending_reset
        self.pending_reset = False
        return pending

    def microphone_warning(self) -> str | None:
        """Shown over the carousel when recognition works but the mic is off."""
        if self.supports_recognition and not self.microphone_available:
            return "Turn on your microphone to practice the scene."
        return None

    def status_message(self) -> str:
        if not self.supports_recognition:
            return "Speech recognition is not available in this browser."
        if not self.microphone_available:
            return "Microphone access is blocked. Check your browser settings and try again."
        if self.listening:
            return "Listening for the magic words."
        return "Tap restart if you want to try again."
