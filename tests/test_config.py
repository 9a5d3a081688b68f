import pytest
from pydantic import ValidationError

from routed_server.core.config import Settings, parse_address


@pytest.mark.parametrize(
    "addr, expected",
    [
        (":8080", ("", 8080)),
        ("127.0.0.1:0", ("127.0.0.1", 0)),
        ("localhost:80", ("localhost", 80)),
        ("[::1]:9000", ("::1", 9000)),
    ],
)
def test_parse_address(addr, expected):
    assert parse_address(addr) == expected


@pytest.mark.parametrize(
    "addr",
    ["8080", "localhost:", "localhost:http", "localhost:70000", "::1:80", "[::1:80"],
)
def test_parse_address_rejects(addr):
    with pytest.raises(ValueError):
        parse_address(addr)


def test_defaults_bind_all_interfaces():
    settings = Settings()
    assert settings.HTTP_ADDR == ":8080"
    assert settings.http_host == ""
    assert settings.http_port == 8080
    assert settings.LOG_FORMAT == "json"


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("HTTP_ADDR", "127.0.0.1:9999")
    monkeypatch.setenv("stop_timeout", "2.5")
    settings = Settings()
    assert settings.http_port == 9999
    assert settings.STOP_TIMEOUT == 2.5


def test_invalid_address_fails_validation(monkeypatch):
    monkeypatch.setenv("HTTP_ADDR", "no-port")
    with pytest.raises(ValidationError):
        Settings()


def test_timeouts_must_be_positive():
    with pytest.raises(ValidationError):
        Settings(START_TIMEOUT=0)
