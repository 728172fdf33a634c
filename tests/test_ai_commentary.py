import asyncio
import json

import pytest

from luckywheel.ai.commentary import (
    COMMENTATOR_SYSTEM_EN,
    COMMENTATOR_SYSTEM_VI,
    CommentaryService,
    summarize_remaining,
)
from luckywheel.ai.logging import AILogger
from luckywheel.config.settings import Settings
from luckywheel.core.errors import EnrichmentFailure
from luckywheel.core.events import EventBus
from luckywheel.main import build_commentary
from luckywheel.wheel.controller import SpinController

from conftest import FakeAudio, FixedRandom


class FakeClient:
    def __init__(self, response="Chúc mừng!", available=True):
        self.response = response
        self.is_available = available
        self.requests = []

    async def generate_text(self, prompt, model, system_instruction=None, category="text_generation"):
        self.requests.append({"prompt": prompt, "model": model, "system": system_instruction})
        return self.response


def test_summarize_remaining():
    assert summarize_remaining([]) == "-"
    assert summarize_remaining(["Beer", "Tea", "Beer"]) == "Beer x2, Tea x1"
    names = [f"P{i}" for i in range(10)]
    assert summarize_remaining(names, limit=3).endswith("...")


def test_prompt_mentions_winner_prize_and_stock():
    service = CommentaryService(client=FakeClient(), style_hint="Hi {name}!")
    prompt = service.build_prompt("Beer", ["Tea", "Tea"], "Lan")
    assert "Winner: Lan" in prompt
    assert "Prize won: Beer" in prompt
    assert "Tea x2" in prompt
    assert "Hi {name}!" in prompt


def test_generate_cleans_response():
    client = FakeClient(response='  "Lan wins\n  the Beer!"  ')
    service = CommentaryService(client=client, model="gemini-test", language="en")

    text = asyncio.run(service.generate("Beer", ["Tea"], "Lan"))

    assert text == "Lan wins the Beer!"
    assert client.requests[0]["model"] == "gemini-test"
    assert client.requests[0]["system"] == COMMENTATOR_SYSTEM_EN


def test_vietnamese_is_default_language():
    client = FakeClient()
    asyncio.run(CommentaryService(client=client).generate("Beer", [], "Lan"))
    assert client.requests[0]["system"] == COMMENTATOR_SYSTEM_VI


def test_unavailable_client_fails():
    service = CommentaryService(client=FakeClient(available=False))
    with pytest.raises(EnrichmentFailure):
        asyncio.run(service.generate("Beer", [], "Lan"))


@pytest.mark.parametrize("response", [None, "", '  ""  '])
def test_empty_response_fails(response):
    service = CommentaryService(client=FakeClient(response=response))
    with pytest.raises(EnrichmentFailure):
        asyncio.run(service.generate("Beer", [], "Lan"))


def test_ai_logger_writes_json(tmp_path):
    ai_logger = AILogger(tmp_path)
    entry_id = ai_logger.log_text_generation("commentary", "prompt", "response", "gemini-test")

    files = list(tmp_path.glob("*/commentary_*.json"))
    assert entry_id and len(files) == 1
    data = json.loads(files[0].read_text(encoding="utf-8"))
    assert data["id"] == entry_id
    assert data["response"] == "response"


def test_ai_logger_disabled_without_dir():
    ai_logger = AILogger()
    assert not ai_logger.enabled
    assert ai_logger.log_text_generation("commentary", "p", "r", "m") == ""


def test_prompt_follows_template_change(monkeypatch, templates):
    monkeypatch.delenv("GEMINI_API_KEY", raising=False)
    client = FakeClient(response="Bravo!")
    service = CommentaryService(client=client, style_hint="OLD {name}")
    event_bus = EventBus()
    commentary = build_commentary(Settings(_env_file=None), event_bus, service=service)
    controller = SpinController(
        templates,
        audio=FakeAudio(),
        commentary=commentary,
        event_bus=event_bus,
        rng=FixedRandom(0.1),
    )

    async def scenario():
        controller.set_message_template("NEW {name} got {prize}")
        controller.request_spin("Lan")
        controller.complete_spin(controller.spin_token, 210.0)
        assert controller.commentary_text == "NEW Lan got A"
        while controller.commentary_pending:
            await asyncio.sleep(0)

    asyncio.run(scenario())
    prompt = client.requests[0]["prompt"]
    assert "NEW {name} got {prize}" in prompt
    assert "OLD" not in prompt
    assert controller.commentary_text == "Bravo!"
