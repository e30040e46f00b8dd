"""Tests for roost.config and roost.env — configuration loading."""

import dataclasses
import os
from pathlib import Path

import pytest

from roost.config import AppConfig
from roost.env import env_flag, load_env, parse_env


class TestAppConfig:
    def test_defaults(self) -> None:
        config = AppConfig()
        assert config.debug is False
        assert config.controller_suffix == "Controller"
        assert config.default_controller == "home"
        assert config.default_action == "index"
        assert config.fallback_routing is True
        assert config.fallback_middleware == ()

    def test_frozen(self) -> None:
        with pytest.raises(dataclasses.FrozenInstanceError):
            AppConfig().debug = True  # type: ignore[misc]

    def test_from_env(self) -> None:
        config = AppConfig.from_env(
            {
                "APP_DEBUG": "true",
                "APP_SECRET_KEY": "s3cr3t",
                "APP_FALLBACK_ROUTING": "off",
                "APP_FALLBACK_MIDDLEWARE": "AuthMiddleware, CsrfMiddleware,",
                "APP_MAINTENANCE": "1",
                "APP_LOG_LEVEL": "warning",
                "APP_LOG_FILE": "logs/app.log",
            }
        )
        assert config.debug is True
        assert config.secret_key == "s3cr3t"
        assert config.fallback_routing is False
        assert config.fallback_middleware == ("AuthMiddleware", "CsrfMiddleware")
        assert config.maintenance is True
        assert config.log_level == "warning"
        assert config.log_file == "logs/app.log"

    def test_from_env_empty(self) -> None:
        assert AppConfig.from_env({}) == AppConfig()

    def test_from_env_reads_env_file(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setattr(os, "environ", {})
        env_file = tmp_path / ".env"
        env_file.write_text("APP_SECRET_KEY=from-file\n")
        config = AppConfig.from_env(env_file=env_file)
        assert config.secret_key == "from-file"


class TestParseEnv:
    def test_lines(self) -> None:
        text = """
        # comment
        APP_DEBUG=true
        export APP_NAME = "My App"
        SINGLE='quoted'
        NOVALUE
        EMPTY=
        """
        assert parse_env(text) == {
            "APP_DEBUG": "true",
            "APP_NAME": "My App",
            "SINGLE": "quoted",
            "EMPTY": "",
        }

    def test_value_with_equals(self) -> None:
        assert parse_env("URL=postgres://u:p@h/db?x=1") == {"URL": "postgres://u:p@h/db?x=1"}


class TestLoadEnv:
    def test_existing_values_win(self, tmp_path: Path) -> None:
        env_file = tmp_path / ".env"
        env_file.write_text("A=file\nB=file\n")
        environ = {"A": "process"}
        values = load_env(env_file, environ)
        assert values == {"A": "file", "B": "file"}
        assert environ == {"A": "process", "B": "file"}

    def test_missing_file(self, tmp_path: Path) -> None:
        environ: dict[str, str] = {}
        assert load_env(tmp_path / "nope.env", environ) == {}
        assert environ == {}


@pytest.mark.parametrize(
    ("value", "expected"),
    [("true", True), ("1", True), ("YES", True), (" on ", True), ("false", False), ("0", False)],
)
def test_env_flag(value: str, expected: bool) -> None:
    assert env_flag(value) is expected


def test_env_flag_default() -> None:
    assert env_flag(None) is False
    assert env_flag(None, True) is True
