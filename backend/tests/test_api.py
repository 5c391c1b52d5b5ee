"""
API tests for speech matching, settings, carousels and gift playgrounds.
Carousel flow: transcript -> MATCHED (client told to reset) -> stale text ignored until empty.
"""

import uuid


def test_normalize_endpoint(client):
    """Normalize endpoint returns the token list, with redbox split."""
    r = client.post("/speech/normalize", json={"text": "Open the RedBox, please!"})
    assert r.status_code == 200
    assert r.json()["tokens"] == ["open", "the", "red", "box", "please"]


def test_match_uses_explicit_tolerance(client):
    """An explicit tolerance in the request decides the fuzzy match."""
    r = client.post(
        "/speech/match",
        json={"transcript": "open seseme", "phrases": ["open sesame"], "tolerance": 0},
    )
    assert r.status_code == 200
    assert r.json() == {"matched": False, "tolerance": 0}

    r = client.post(
        "/speech/match",
        json={"transcript": "open seseme", "phrases": ["open sesame"], "tolerance": 1},
    )
    assert r.json()["matched"] is True


def test_match_defaults_to_speech_setting(client):
    """Without a tolerance the current speech setting is used."""
    client.put("/settings/speech", json={"tolerance": 0})
    r = client.post("/speech/match", json={"transcript": "open seseme", "phrases": ["open sesame"]})
    assert r.json() == {"matched": False, "tolerance": 0}


def test_match_rejects_out_of_range_tolerance(client):
    """Tolerance above 3 is rejected with 422."""
    r = client.post("/speech/match", json={"transcript": "a", "phrases": ["a"], "tolerance": 4})
    assert r.status_code == 422


def test_speech_settings_roundtrip(client):
    """Speech settings can be read and updated; invalid values are rejected."""
    r = client.get("/settings/speech")
    assert r.status_code == 200
    assert r.json()["tolerance"] == 1
    assert r.json()["description"] == "Small mispronunciations allowed"

    r = client.put("/settings/speech", json={"tolerance": 3})
    assert r.status_code == 200
    assert r.json() == {"tolerance": 3, "description": "Very relaxed matching"}

    r = client.put("/settings/speech", json={"tolerance": -1})
    assert r.status_code == 422


def test_resolve_endpoint(client):
    """Resolve endpoint reads the order it is given; a bare item target is a 400."""
    r = client.post("/targets/resolve", json={"target": {"kind": "last"}, "order": ["b", "a", "c"]})
    assert r.status_code == 200
    assert r.json() == {"item_id": "c"}

    r = client.post("/targets/resolve", json={"target": {"kind": "first"}, "order": []})
    assert r.json() == {"item_id": None}

    r = client.post("/targets/resolve", json={"target": {"kind": "item"}, "order": ["a"]})
    assert r.status_code == 400


def test_carousel_defaults_to_rainbow_scenes(client):
    """A new carousel holds the built-in scenes, all idle."""
    r = client.post("/carousels", json={})
    assert r.status_code == 200
    data = r.json()
    assert [s["id"] for s in data["scenes"]] == [1, 2, 3]
    assert data["active_scene_id"] == 1
    assert data["completed"] == {}
    assert all(s["state"] == "IDLE" for s in data["scenes"])


def test_carousel_unknown_404(client):
    """Unknown carousel ids return 404."""
    r = client.get(f"/carousels/{uuid.uuid4()}")
    assert r.status_code == 404
    r = client.post(f"/carousels/{uuid.uuid4()}/transcript", json={"transcript": "more juice"})
    assert r.status_code == 404


def test_carousel_match_then_suppress_until_empty(client):
    """A match asks the client to reset and ignores stale text until it is empty."""
    carousel_id = client.post("/carousels", json={}).json()["carousel_id"]
    url = f"/carousels/{carousel_id}/transcript"

    r = client.post(url, json={"transcript": "hmm can I have more juice"})
    assert r.status_code == 200
    d0 = r.json()
    assert d0["outcome"] == "MATCHED"
    assert d0["reset_transcript"] is True
    assert d0["state"]["completed"] == {"1": True}
    assert d0["state"]["scenes"][0]["listen_state"] == "AWAITING_CLEAR"

    d1 = client.post(url, json={"transcript": "hmm can I have more juice"}).json()
    assert d1["outcome"] == "SUPPRESSED"
    assert d1["reset_transcript"] is False

    d2 = client.post(url, json={"transcript": ""}).json()
    assert d2["outcome"] == "CLEARED"
    assert d2["state"]["scenes"][0]["state"] == "MATCHED"


def test_carousel_advance_and_reentry(client):
    """Swiping clears the left scene; coming back to the screen starts over."""
    data = client.post("/carousels", json={}).json()
    carousel_id = data["carousel_id"]
    base = f"/carousels/{carousel_id}"

    client.post(f"{base}/navigate", json={"path": "/play/phrase-rainbow/"})
    client.post(f"{base}/transcript", json={"transcript": "more juice please"})

    r = client.post(f"{base}/advance", json={"direction": 1})
    assert r.status_code == 200
    d = r.json()
    assert d["active_scene_id"] == 2
    assert d["completed"] == {}

    client.post(f"{base}/transcript", json={"transcript": ""})
    d = client.post(f"{base}/transcript", json={"transcript": "I am hungry"}).json()
    assert d["state"]["completed"] == {"2": True}
    instance = d["state"]["instance_id"]

    left = client.post(f"{base}/navigate", json={"path": "/play/"}).json()
    assert left["reentered"] is False
    assert left["state"]["completed"] == {"2": True}

    back = client.post(f"{base}/navigate", json={"path": "/play/phrase-rainbow/"}).json()
    assert back["reentered"] is True
    assert back["reset_transcript"] is True
    assert back["state"]["instance_id"] != instance
    assert back["state"]["active_scene_id"] == 1
    assert back["state"]["completed"] == {}


def test_carousel_advance_rejects_bad_direction(client):
    """Direction other than 1/-1 is rejected with 422."""
    carousel_id = client.post("/carousels", json={}).json()["carousel_id"]
    r = client.post(f"/carousels/{carousel_id}/advance", json={"direction": 2})
    assert r.status_code == 422


def test_carousel_with_custom_scenes(client):
    """Carousel accepts custom scenes and matches their phrases."""
    r = client.post(
        "/carousels",
        json={"scenes": [{"id": 7, "prompt": "Open sesame", "phrase_variants": ["open sesame"]}]},
    )
    carousel_id = r.json()["carousel_id"]
    d = client.post(
        f"/carousels/{carousel_id}/transcript",
        json={"transcript": "open seseme", "tolerance": 1},
    ).json()
    assert d["outcome"] == "MATCHED"
    assert d["state"]["completed"] == {"7": True}


def test_playground_voice_opens_gift_after_reorder(client):
    """Ordinal prompts follow the dragged order; close shuts the open gift."""
    r = client.post("/playgrounds", json={})
    assert r.status_code == 200
    data = r.json()
    assert data["order"] == ["red", "blue", "polka", "green"]
    assert data["listening"] is True
    assert data["status_message"] == "Listening for the magic words."
    base = f"/playgrounds/{data['playground_id']}"

    r = client.post(f"{base}/reorder", json={"gift_id": "polka", "to_index": 0})
    assert r.json()["order"] == ["polka", "red", "blue", "green"]

    d = client.post(f"{base}/transcript", json={"transcript": "um open the first box"}).json()
    assert d["prompt_id"] == "first-box"
    assert d["reset_transcript"] is True
    assert d["state"]["open_gift_id"] == "polka"
    assert d["state"]["last_prompt_label"] == "Can you open the first box?"

    d = client.post(f"{base}/transcript", json={"transcript": "la la la"}).json()
    assert d["prompt_id"] is None
    assert d["reset_transcript"] is False

    closed = client.post(f"{base}/close").json()
    assert closed["open_gift_id"] is None


def test_playground_rotate_and_errors(client):
    """Rotation accumulates; unknown gift is 400 and unknown playground 404."""
    playground_id = client.post("/playgrounds", json={}).json()["playground_id"]
    base = f"/playgrounds/{playground_id}"

    r = client.post(f"{base}/rotate", json={"gift_id": "green", "delta": 1.5})
    assert r.status_code == 200
    assert r.json()["rotations"]["green"] == 1.5

    r = client.post(f"{base}/reorder", json={"gift_id": "purple", "to_index": 0})
    assert r.status_code == 400

    r = client.get(f"/playgrounds/{uuid.uuid4()}")
    assert r.status_code == 404


def test_playground_recognizer_status_and_restart(client):
    """Status message follows the reported recognizer; restart resets and listens."""
    playground_id = client.post("/playgrounds", json={}).json()["playground_id"]
    base = f"/playgrounds/{playground_id}"

    r = client.post(f"{base}/recognizer", json={"microphone_available": False, "listening": False})
    assert r.status_code == 200
    assert r.json()["status_message"].startswith("Microphone access is blocked")

    r = client.post(f"{base}/recognizer", json={"microphone_available": True})
    assert r.json()["status_message"] == "Tap restart if you want to try again."

    r = client.post(f"{base}/restart")
    assert r.status_code == 200
    d = r.json()
    assert d["reset_transcript"] is True
    assert d["state"]["listening"] is True


def test_carousel_reports_microphone_warning(client):
    """A blocked microphone shows the carousel warning until it is turned on."""
    data = client.post("/carousels", json={}).json()
    assert data["listening"] is True
    assert data["microphone_warning"] is None
    base = f"/carousels/{data['carousel_id']}"

    r = client.post(f"{base}/recognizer", json={"microphone_available": False, "listening": False})
    assert r.status_code == 200
    assert r.json()["listening"] is False
    assert r.json()["microphone_warning"] == "Turn on your microphone to practice the scene."

    r = client.post(f"{base}/recognizer", json={"microphone_available": True})
    assert r.json()["microphone_warning"] is None


def test_carousel_recognizer_unknown_404(client):
    """Recognizer report for an unknown carousel returns 404."""
    r = client.post(f"/carousels/{uuid.uuid4()}/recognizer", json={"listening": True})
    assert r.status_code == 404


def test_carousel_rematch_after_swipe_back(client):
    """A scene left before the clear arrived can be completed again after swiping back."""
    carousel_id = client.post("/carousels", json={}).json()["carousel_id"]
    base = f"/carousels/{carousel_id}"

    assert client.post(f"{base}/transcript", json={"transcript": "more juice"}).json()["outcome"] == "MATCHED"
    client.post(f"{base}/advance", json={"direction": 1})
    assert client.post(f"{base}/transcript", json={"transcript": ""}).json()["outcome"] == "EMPTY"
    client.post(f"{base}/transcript", json={"transcript": "i like trains"})
    client.post(f"{base}/advance", json={"direction": -1})

    d = client.post(f"{base}/transcript", json={"transcript": "i like trains more juice"}).json()
    assert d["outcome"] == "MATCHED"
    assert d["reset_transcript"] is True
    assert d["state"]["completed"] == {"1": True}


def test_close_carousel_stops_listening(client):
    """Closing a carousel stops the recognizer and forgets the carousel."""
    carousel_id = client.post("/carousels", json={}).json()["carousel_id"]

    r = client.delete(f"/carousels/{carousel_id}")
    assert r.status_code == 200
    assert r.json() == {"id": carousel_id, "listening": False}

    assert client.get(f"/carousels/{carousel_id}").status_code == 404
    assert client.delete(f"/carousels/{carousel_id}").status_code == 404


def test_close_playground_stops_listening(client):
    """Closing a playground stops the recognizer and forgets the table."""
    playground_id = client.post("/playgrounds", json={}).json()["playground_id"]

    r = client.delete(f"/playgrounds/{playground_id}")
    assert r.status_code == 200
    assert r.json() == {"id": playground_id, "listening": False}

    r = client.post(f"/playgrounds/{playground_id}/transcript", json={"transcript": "open the red box"})
    assert r.status_code == 404
