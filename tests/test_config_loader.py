from __future__ import annotations

from pathlib import Path

import pytest

from logstash_udp.config import loader
from logstash_udp.core.validation import ConfigurationError


def test_configuration_precedence(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    user_dir = tmp_path / "user"
    user_dir.mkdir()
    (user_dir / "logstash_udp.toml").write_text("""[logstash]\nport = 1001\n""")
    monkeypatch.setattr(loader, "user_config_dir", lambda _: str(user_dir))

    project_dir = tmp_path / "project"
    project_dir.mkdir()
    (project_dir / "logstash_udp.toml").write_text("""[logstash]\nport = 1002\n""")
    monkeypatch.chdir(project_dir)

    (project_dir / "pyproject.toml").write_text("""[tool.logstash_udp.logstash]\nport = 1003\n""")

    monkeypatch.setenv("LOGSTASH_UDP__LOGSTASH__PORT", "1004")

    config = loader.load_configuration({"logstash": {"port": 1005}})
    assert config.logstash is not None and config.logstash.port == 1005

    config = loader.load_configuration({})
    assert config.logstash is not None and config.logstash.port == 1004

    monkeypatch.delenv("LOGSTASH_UDP__LOGSTASH__PORT")
    config = loader.load_configuration({})
    assert config.logstash is not None and config.logstash.port == 1003

    (project_dir / "pyproject.toml").unlink()
    config = loader.load_configuration({})
    assert config.logstash is not None and config.logstash.port == 1002

    (project_dir / "logstash_udp.toml").unlink()
    config = loader.load_configuration({})
    assert config.logstash is not None and config.logstash.port == 1001


def test_toml_sections_are_typed() -> None:
    Path("logstash_udp.toml").write_text(
        "\n".join(
            [
                "[logstash]",
                'host = "logs.internal"',
                "port = 5959",
                'application = "billing"',
                'mdc_keys = ["request_id", " user "]',
                "append_class_information = true",
                "stacktrace_length = 4000",
                "",
                "[logstash.parameters]",
                'zone = "eu-1"',
                'team = "payments"',
                "",
                "[console]",
                "enabled = false",
            ]
        )
    )

    settings = loader.load_configuration({})

    assert settings.console_enabled is False
    cfg = settings.logstash
    assert cfg is not None
    assert cfg.host == "logs.internal"
    assert cfg.application == "billing"
    assert cfg.environment is None
    assert cfg.mdc_keys == ("request_id", "user")
    assert list(cfg.parameters.items()) == [("zone", "eu-1"), ("team", "payments")]
    assert cfg.append_class_information is True
    assert cfg.stacktrace_length == 4000


def test_yaml_config_is_loaded() -> None:
    pytest.importorskip("yaml")
    Path("logstash_udp.yaml").write_text(
        "logstash:\n  port: 6000\n  parameters: group=PSP&group2=REQUEST\n"
    )

    settings = loader.load_configuration({})

    assert settings.logstash is not None
    assert settings.logstash.port == 6000
    assert dict(settings.logstash.parameters) == {"group": "PSP", "group2": "REQUEST"}


def test_env_values_are_coerced(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("LOGSTASH_UDP__LOGGING__ROOT__LEVEL", "  DEBUG  ")
    monkeypatch.setenv("LOGSTASH_UDP__LOGSTASH__PORT", " 5959 ")
    monkeypatch.setenv("LOGSTASH_UDP__LOGSTASH__MDC_KEYS", "a, b")
    monkeypatch.setenv("LOGSTASH_UDP__LOGSTASH__APPEND_CLASS_INFORMATION", "true")

    settings = loader.load_configuration({})

    assert settings.root_level == "DEBUG"
    assert settings.logstash is not None
    assert settings.logstash.port == 5959
    assert settings.logstash.mdc_keys == ("a", "b")
    assert settings.logstash.append_class_information is True


def test_missing_port_leaves_logstash_unconfigured() -> None:
    settings = loader.load_configuration({})

    assert settings.logstash_enabled is True
    assert settings.logstash is None
    assert settings.console_enabled is True


def test_env_text_fields_are_kept_verbatim(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("LOGSTASH_UDP__LOGSTASH__PORT", "5959")
    monkeypatch.setenv("LOGSTASH_UDP__LOGSTASH__APPLICATION", "007")
    monkeypatch.setenv("LOGSTASH_UDP__LOGSTASH__ENVIRONMENT", "true")
    monkeypatch.setenv("LOGSTASH_UDP__LOGSTASH__HOST", "[::1]")
    monkeypatch.setenv("LOGSTASH_UDP__LOGSTASH__PARAMETERS", "tags=[a,b]&meta={x}")

    settings = loader.load_configuration({})

    cfg = settings.logstash
    assert cfg is not None
    assert cfg.application == "007"
    assert cfg.environment == "true"
    assert cfg.host == "[::1]"
    assert dict(cfg.parameters) == {"tags": "[a,b]", "meta": "{x}"}


def test_env_typed_fields_are_parsed(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("LOGSTASH_UDP__LOGSTASH__PORT", "5959")
    monkeypatch.setenv("LOGSTASH_UDP__LOGSTASH__STACKTRACE_LENGTH", " 120 ")
    monkeypatch.setenv("LOGSTASH_UDP__CONSOLE__ENABLED", "off")
    monkeypatch.setenv("LOGSTASH_UDP__LOGGING__CAPTURE_WARNINGS", "Yes")

    settings = loader.load_configuration({})

    assert settings.logstash is not None
    assert settings.logstash.stacktrace_length == 120
    assert settings.console_enabled is False
    assert settings.capture_warnings is True


def test_env_port_that_is_not_a_number_is_rejected(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("LOGSTASH_UDP__LOGSTASH__PORT", "logstash")

    with pytest.raises(ConfigurationError):
        loader.load_configuration({})
