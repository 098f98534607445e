import pytest
from pydantic import ValidationError

from linear_mcp.core.comparators import DateComparator, IdComparator, NumberComparator, comparator_value
from linear_mcp.core.config import ConfigLoader, get_api_key
from linear_mcp.core.errors import ConfigError


@pytest.fixture
def fresh_config(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("LINEAR_API_KEY", raising=False)
    monkeypatch.delenv("LINEAR_MCP_CONFIG", raising=False)
    yield tmp_path
    ConfigLoader._instance = None
    ConfigLoader._config = None


def test_defaults_without_config_file(fresh_config):
    cfg = ConfigLoader.reload().get_config()
    assert cfg["linear_api_url"] == "https://api.linear.app/graphql"
    assert cfg["request_timeout"] == 30.0
    with pytest.raises(ConfigError):
        get_api_key(cfg)


def test_yaml_and_env_override(fresh_config, monkeypatch):
    config_file = fresh_config / "linear.yaml"
    config_file.write_text("linear_api_url: https://example.test/graphql\nlinear_api_key: from-yaml\n")
    monkeypatch.setenv("LINEAR_MCP_CONFIG", str(config_file))
    monkeypatch.setenv("LINEAR_API_KEY", "from-env")

    cfg = ConfigLoader.reload().get_config()
    assert cfg["linear_api_url"] == "https://example.test/graphql"
    assert get_api_key(cfg) == "from-env"


def test_non_mapping_config_rejected(fresh_config):
    (fresh_config / "config.yaml").write_text("- just\n- a list\n")
    with pytest.raises(ConfigError):
        ConfigLoader.reload()


def test_id_comparator_uses_wire_alias():
    comparator = IdComparator.model_validate({"in": ["a", "b"]})
    assert comparator_value(comparator) == {"in": ["a", "b"]}


def test_number_comparator_range_keeps_zero():
    comparator = NumberComparator.model_validate({"gte": 0, "lt": 3})
    assert comparator_value(comparator) == {"gte": 0, "lt": 3}


def test_comparator_rejects_unknown_operator():
    with pytest.raises(ValidationError):
        DateComparator.model_validate({"before": "2026-01-01"})


def test_setup_logging_is_idempotent(tmp_path):
    import logging
    import sys

    from linear_mcp.core.logging_config import setup_logging

    root = logging.getLogger()
    before = list(root.handlers)
    level = root.level
    try:
        setup_logging(tmp_path / "logs", level="DEBUG")
        setup_logging(tmp_path / "logs", level="DEBUG")
        added = [h for h in root.handlers if h not in before]
        assert sum(isinstance(h, logging.FileHandler) for h in added) <= 1
        assert sum(getattr(h, "stream", None) is sys.stderr for h in root.handlers) >= 1
        assert not any(getattr(h, "stream", None) is sys.stdout for h in added)
        assert list((tmp_path / "logs").glob("server_*.log")) or any(
            isinstance(h, logging.FileHandler) for h in before
        )
    finally:
        for h in root.handlers[:]:
            if h not in before:
                root.removeHandler(h)
                h.close()
        root.setLevel(level)
