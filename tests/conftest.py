import asyncio
from contextlib import contextmanager

import pytest
from starlette.testclient import TestClient

from tec_lms import preferences as preferences_module
from tec_lms.main import app
from tec_lms.preferences import LanguagePreferences, MemoryPreferenceStore
from tec_lms.session import registry

SAMPLE_COURSE = {
    "id": "c-1",
    "code": "MATH101",
    "name": "Mathematics",
    "name_en": "Mathematics",
    "name_km": "គណិតវិទ្យា",
    "description": "Intro course",
    "description_en": "Numbers and shapes",
    "description_km": "លេខ និងរូបរាង",
}

_test_client = TestClient(app)


@contextmanager
def ws_connect(client=None, language=None):
    """Connect to /ws with a pre-created session token. Consumes the auth message."""
    c = client or _test_client
    loop = asyncio.new_event_loop()
    token = loop.run_until_complete(registry.create_session(language=language)).token
    loop.close()
    with c.websocket_connect(f"/ws?token={token}") as ws:
        ws.receive_json()  # consume auth message
        yield ws


@pytest.fixture
def course():
    return dict(SAMPLE_COURSE)


@pytest.fixture
def english_preference(monkeypatch):
    """Swap the process-wide preferences for one whose store holds ``en``."""
    prefs = LanguagePreferences(MemoryPreferenceStore({"language": "en"}))
    monkeypatch.setattr(preferences_module, "preferences", prefs)
    return prefs
