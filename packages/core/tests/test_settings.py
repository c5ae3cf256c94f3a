import pytest
from pydantic import ValidationError

from goodhttp.core import CONTENT_TYPE, ConfigError, Settings, resolve_settings


def test_defaults_applied() -> None:
    settings = resolve_settings("http://collector:31337")
    assert settings.endpoint == "http://collector:31337"
    assert settings.threshold == 20
    assert settings.error_threshold == 0
    assert settings.schema_tag == "good-http"
    assert settings.group_events is False
    assert settings.events is None
    assert settings.transport.timeout_ms == 60_000
    assert settings.transport.headers == {"content-type": CONTENT_TYPE}


def test_missing_endpoint_raises() -> None:
    with pytest.raises(ConfigError, match="endpoint"):
        resolve_settings(None, None)
    with pytest.raises(ConfigError):
        resolve_settings("   ")


def test_endpoint_from_config_and_env(monkeypatch: pytest.MonkeyPatch) -> None:
    assert resolve_settings(config={"endpoint": "http://a"}).endpoint == "http://a"
    monkeypatch.setenv("GOOD_HTTP_ENDPOINT", "http://from-env")
    assert resolve_settings().endpoint == "http://from-env"
    # Explicit argument wins over both.
    assert resolve_settings("http://b", {"endpoint": "http://a"}).endpoint == "http://b"


def test_wire_and_snake_case_keys() -> None:
    wire = resolve_settings(
        "http://a",
        {"threshold": 5, "errorThreshold": 3, "groupEvents": True, "schema": "custom"},
    )
    snake = resolve_settings(
        "http://a",
        {"threshold": 5, "error_threshold": 3, "group_events": True, "schema_tag": "custom"},
    )
    assert wire == snake
    assert wire.error_threshold == 3
    assert wire.group_events is True
    assert wire.schema_tag == "custom"


def test_unbounded_error_threshold() -> None:
    settings = resolve_settings("http://a", {"error_threshold": None})
    assert settings.error_threshold is None
    assert settings.unbounded is True


@pytest.mark.parametrize(
    "config",
    [
        {"threshold": -1},
        {"error_threshold": -2},
        {"transport": {"timeout_ms": 0}},
        {"unknown_option": True},
    ],
)
def test_invalid_values_raise_config_error(config) -> None:
    with pytest.raises(ConfigError):
        resolve_settings("http://a", config)


def test_content_type_is_forced() -> None:
    settings = resolve_settings(
        "http://a",
        {
            "transport": {
                "timeout": 1500,
                "headers": {"Content-Type": "text/plain", "x-api-key": 12345},
            }
        },
    )
    assert settings.transport.timeout_ms == 1500
    assert settings.transport.headers == {
        "x-api-key": "12345",
        "content-type": CONTENT_TYPE,
    }


def test_settings_are_immutable() -> None:
    settings = resolve_settings("http://a")
    with pytest.raises(ValidationError):
        settings.threshold = 1  # type: ignore[misc]
    assert isinstance(settings, Settings)
