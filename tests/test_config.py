from pathlib import Path

import pytest

from astro_rules.config import Settings, load_settings


def test_defaults_when_unset():
    assert load_settings({}) == Settings()


def test_values_from_environment():
    settings = load_settings(
        {
            "ASTRO_RULES_INCLUDE_MINOR": "off",
            "ASTRO_RULES_KEY_ASPECTS": "5",
            "ASTRO_RULES_LOG_LEVEL": "debug",
            "ASTRO_RULES_OUTPUT_DIR": "/tmp/reports",
        }
    )
    assert settings.include_minor_aspects is False
    assert settings.key_aspect_limit == 5
    assert settings.log_level == "DEBUG"
    assert settings.output_dir == Path("/tmp/reports")


def test_blank_values_fall_back_to_defaults():
    settings = load_settings({"ASTRO_RULES_INCLUDE_MINOR": " ", "ASTRO_RULES_KEY_ASPECTS": ""})
    assert settings.include_minor_aspects is True
    assert settings.key_aspect_limit == 10


@pytest.mark.parametrize(
    "name,value",
    [
        ("ASTRO_RULES_INCLUDE_MINOR", "maybe"),
        ("ASTRO_RULES_KEY_ASPECTS", "ten"),
        ("ASTRO_RULES_KEY_ASPECTS", "0"),
        ("ASTRO_RULES_LOG_LEVEL", "LOUD"),
    ],
)
def test_bad_values_name_the_variable(name, value):
    with pytest.raises(ValueError, match=name):
        load_settings({name: value})


def test_reads_process_environment(monkeypatch):
    monkeypatch.setenv("ASTRO_RULES_KEY_ASPECTS", "3")
    assert load_settings().key_aspect_limit == 3
