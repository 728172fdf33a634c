import asyncio
import time
from types import SimpleNamespace

import pytest

from luckywheel.ai import client as client_module
from luckywheel.ai.client import GeminiClient, GeminiConfig
from luckywheel.ai.logging import AILogger


class ScriptedSDK:
    """Stands in for genai.Client; each call takes the next scripted outcome.

    An outcome is an exception to raise, a float of seconds to block
    before answering "late", or the response text.
    """

    script = []
    instances = []

    def __init__(self, api_key):
        self.api_key = api_key
        self.models = self
        self.calls = []
        ScriptedSDK.instances.append(self)

    def generate_content(self, model, contents, config):
        self.calls.append({"model": model, "contents": contents, "config": config})
        outcome = ScriptedSDK.script.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        if isinstance(outcome, float):
            time.sleep(outcome)
            return SimpleNamespace(text="late")
        return SimpleNamespace(text=outcome)


@pytest.fixture
def sdk(monkeypatch):
    ScriptedSDK.script = []
    ScriptedSDK.instances = []
    monkeypatch.setattr(client_module, "genai", SimpleNamespace(Client=ScriptedSDK))
    monkeypatch.setattr(client_module, "get_ai_logger", lambda: AILogger())
    return ScriptedSDK


def make_client(**overrides):
    options = {"api_key": "key", "timeout": 5.0, "max_retries": 3, "retry_delay": 0.0}
    options.update(overrides)
    return GeminiClient(GeminiConfig(**options))


def calls(sdk):
    return sdk.instances[0].calls if sdk.instances else []


def test_returns_text(sdk):
    sdk.script = ["Chúc mừng!"]
    text = asyncio.run(make_client().generate_text("prompt", model="gemini-test", system_instruction="sys"))

    assert text == "Chúc mừng!"
    assert sdk.instances[0].api_key == "key"
    request = calls(sdk)[0]
    assert request["model"] == "gemini-test"
    assert request["contents"] == "prompt"


def test_overload_is_retried(sdk):
    sdk.script = [RuntimeError("503 UNAVAILABLE: model overloaded"), "second try"]
    text = asyncio.run(make_client().generate_text("prompt"))

    assert text == "second try"
    assert len(calls(sdk)) == 2


def test_other_errors_are_not_retried(sdk):
    sdk.script = [ValueError("400 invalid argument"), "unused"]
    text = asyncio.run(make_client().generate_text("prompt"))

    assert text is None
    assert len(calls(sdk)) == 1


def test_timeout_is_retried(sdk):
    sdk.script = [0.3, "in time"]
    text = asyncio.run(make_client(timeout=0.05).generate_text("prompt"))

    assert text == "in time"
    assert len(calls(sdk)) == 2


def test_gives_up_after_max_retries(sdk):
    sdk.script = ["", "", "", "never reached"]
    text = asyncio.run(make_client().generate_text("prompt"))

    assert text is None
    assert len(calls(sdk)) == 3


def test_persistent_overload_gives_up(sdk):
    sdk.script = [RuntimeError("model overloaded")] * 2
    text = asyncio.run(make_client(max_retries=2).generate_text("prompt"))

    assert text is None
    assert len(calls(sdk)) == 2


def test_no_key_never_connects(sdk, monkeypatch):
    monkeypatch.delenv("GEMINI_API_KEY", raising=False)
    client = GeminiClient()

    assert not client.is_available
    assert asyncio.run(client.generate_text("prompt")) is None
    assert sdk.instances == []
