"""
Pytest configuration and shared fixtures for the speakplay backend tests.
Game sessions and speech settings live in memory; reset them around each test.
"""

import pytest
from fastapi.testclient import TestClient


@pytest.fixture(autouse=True)
def clear_sessions():
    """Clear in-memory carousels/playgrounds and restore the default tolerance."""
    from speakplay.core import settings, store

    store.clear_all()
    settings.speech_settings.tolerance = settings.DEFAULT_TOLERANCE
    yield
    store.clear_all()
    settings.speech_settings.tolerance = settings.DEFAULT_TOLERANCE


@pytest.fixture
def client():
    from speakplay.main import app

    return TestClient(app)


@pytest.fixture
def juice_scenes():
    from speakplay.core.completion import Scene

    return [
        Scene(id=1, prompt="More juice", phrase_variants=("more juice", "can i have more juice")),
        Scene(id=2, prompt="I'm hungry", phrase_variants=("i'm hungry", "i am hungry")),
        Scene(id=3, prompt="I'm thirsty", phrase_variants=("i'm thirsty", "i need water")),
    ]
