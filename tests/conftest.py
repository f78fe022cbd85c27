import pytest
from fastapi.testclient import TestClient

from schedra_ai.llm_client import GenerationClient, KeyCursor
from schedra_ai.main import app, get_generation_client

PRIMARY = "primary-model"
STABLE = "stable-model"


class FakeTransport:
    """
    Scripted stand-in for Gemini.

    `script` maps an API key (or an (api_key, model) pair) to a list of
    outcomes; strings are returned, exceptions raised. The last outcome
    repeats once the list runs out.
    """

    def __init__(self, script=None):
        self.script = {k: list(v) for k, v in (script or {}).items()}
        self.calls = []

    async def __call__(self, api_key, model_name, prompt):
        self.calls.append((api_key, model_name))
        outcomes = self.script.get((api_key, model_name)) or self.script.get(api_key)
        if not outcomes:
            raise AssertionError(f"unexpected call with {api_key}/{model_name}")
        outcome = outcomes.pop(0) if len(outcomes) > 1 else outcomes[0]
        if isinstance(outcome, BaseException):
            raise outcome
        return outcome


class SleepRecorder:
    def __init__(self):
        self.delays = []

    async def __call__(self, seconds):
        self.delays.append(seconds)


@pytest.fixture
def sleeper():
    return SleepRecorder()


@pytest.fixture
def make_client(sleeper):
    def factory(keys, script=None, retries=2, cursor=None):
        transport = FakeTransport(script)
        client = GenerationClient(
            api_keys=keys,
            model=PRIMARY,
            fallback_model=STABLE,
            retries=retries,
            initial_delay_ms=1000,
            cursor=cursor or KeyCursor(),
            transport=transport,
            sleep=sleeper,
        )
        return client, transport
    return factory


@pytest.fixture
def api():
    """TestClient plus a hook to swap the Gemini client behind the route."""
    def use(gen_client):
        app.dependency_overrides[get_generation_client] = lambda: gen_client

    with TestClient(app) as test_client:
        test_client.use = use
        yield test_client
    app.dependency_overrides.clear()
