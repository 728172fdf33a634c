import pydantic
import pytest

from luckywheel.config.prizes import DEFAULT_PRIZES, load_prizes, template_from_dict
from luckywheel.config.settings import Settings
from luckywheel.core.errors import ValidationError
from luckywheel.wheel.commentary import DEFAULT_TEMPLATE
from luckywheel.wheel.inventory import PrizeCategory


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for name in ("GEMINI_API_KEY", "LUCKYWHEEL_LANGUAGE", "LUCKYWHEEL_DEBUG"):
        monkeypatch.delenv(name, raising=False)


def test_settings_defaults():
    settings = Settings(_env_file=None)
    assert settings.language == "vi"
    assert settings.congrats_template == DEFAULT_TEMPLATE
    assert settings.spin.duration_ms == 8000.0
    assert settings.spin.min_rotations == 12.0
    assert settings.audio.music_volume == 0.5
    assert settings.audio.ambience_duration == 8
    assert settings.ai.enabled is True
    assert not settings.ai_available


def test_settings_from_environment(monkeypatch):
    monkeypatch.setenv("GEMINI_API_KEY", "test-key")
    monkeypatch.setenv("LUCKYWHEEL_LANGUAGE", "en")
    monkeypatch.setenv("LUCKYWHEEL_SPIN_DURATION_MS", "1500")
    monkeypatch.setenv("LUCKYWHEEL_AUDIO_MUTED", "true")

    settings = Settings(_env_file=None)
    assert settings.language == "en"
    assert settings.spin.duration_ms == 1500.0
    assert settings.audio.muted is True
    assert settings.ai.gemini_api_key == "test-key"
    assert settings.ai_available


def test_ai_can_be_switched_off(monkeypatch):
    monkeypatch.setenv("GEMINI_API_KEY", "test-key")
    monkeypatch.setenv("LUCKYWHEEL_AI_ENABLED", "false")
    assert not Settings(_env_file=None).ai_available


def test_ambience_duration_bounds(monkeypatch):
    monkeypatch.setenv("LUCKYWHEEL_AUDIO_AMBIENCE_DURATION", "45")
    with pytest.raises(pydantic.ValidationError):
        Settings(_env_file=None)


def test_default_prizes():
    prizes = load_prizes()
    assert [p.count for p in prizes] == [10, 5, 5, 5]
    assert all(p.category is PrizeCategory.FOOD for p in prizes)
    assert prizes is not DEFAULT_PRIZES


def test_load_prizes_from_yaml(tmp_path):
    path = tmp_path / "prizes.yaml"
    path.write_text(
        "prizes:\n"
        "  - name: Headphones\n"
        "    category: tech\n"
        "    count: 2\n"
        "  - name: Lucky money\n"
        "    category: money\n",
        encoding="utf-8",
    )
    prizes = load_prizes(path)
    assert [(p.name, p.category, p.count) for p in prizes] == [
        ("Headphones", PrizeCategory.TECH, 2),
        ("Lucky money", PrizeCategory.MONEY, 1),
    ]


def test_load_prizes_plain_list(tmp_path):
    path = tmp_path / "prizes.yaml"
    path.write_text("- name: Tea\n  count: 3\n", encoding="utf-8")
    assert load_prizes(path)[0].count == 3


def test_load_prizes_rejects_non_list(tmp_path):
    path = tmp_path / "prizes.yaml"
    path.write_text("prizes: nope\n", encoding="utf-8")
    with pytest.raises(ValidationError):
        load_prizes(path)


def test_load_prizes_rejects_bare_names(tmp_path):
    path = tmp_path / "prizes.yaml"
    path.write_text("- Beer\n- name: Tea\n", encoding="utf-8")
    with pytest.raises(ValidationError, match="mapping"):
        load_prizes(path)


@pytest.mark.parametrize(
    "data",
    [
        {"count": 1},
        {"name": "  "},
        {"name": "Tea", "category": "drinks"},
        {"name": "Tea", "count": "many"},
        {"name": "Tea", "count": -1},
    ],
)
def test_invalid_templates(data):
    with pytest.raises(ValidationError):
        template_from_dict(data)


def test_zero_count_is_allowed():
    assert template_from_dict({"name": "Tea", "count": 0}).count == 0
