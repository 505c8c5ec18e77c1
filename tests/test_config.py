# =============================================================================
# test_config.py - Assembler Configuration Tests
# =============================================================================

import pytest

from sicasm.config import DEFAULT_MAX_TEXT_BYTES, AssemblerConfig


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ("SICASM_MAX_TEXT_BYTES", "SICASM_STRICT", "SICASM_ENCODING"):
        monkeypatch.delenv(name, raising=False)


class TestDefaults:
    """Test default settings."""

    def test_defaults(self):
        config = AssemblerConfig()
        assert config.max_text_bytes == DEFAULT_MAX_TEXT_BYTES == 30
        assert config.strict_symbols is False
        assert config.no_label_token == "-"
        assert config.comment_prefix == "."
        assert config.encoding == "latin-1"

    def test_limit_must_hold_an_instruction(self):
        with pytest.raises(ValueError):
            AssemblerConfig(max_text_bytes=2)

    def test_with_overrides_skips_none(self):
        config = AssemblerConfig().with_overrides(strict_symbols=None, max_text_bytes=12)
        assert config.max_text_bytes == 12
        assert config.strict_symbols is False


class TestFromEnv:
    """Test settings read from the environment."""

    def test_empty_environment(self):
        assert AssemblerConfig.from_env() == AssemblerConfig()

    def test_max_text_bytes(self, monkeypatch):
        monkeypatch.setenv("SICASM_MAX_TEXT_BYTES", "15")
        assert AssemblerConfig.from_env().max_text_bytes == 15

    @pytest.mark.parametrize("value", ["lots", "2", "-30"])
    def test_invalid_max_text_bytes_ignored(self, monkeypatch, value):
        monkeypatch.setenv("SICASM_MAX_TEXT_BYTES", value)
        assert AssemblerConfig.from_env().max_text_bytes == 30

    @pytest.mark.parametrize("value, expected", [
        ("1", True),
        ("yes", True),
        ("TRUE", True),
        ("off", False),
        ("0", False),
        ("maybe", False),
    ])
    def test_strict(self, monkeypatch, value, expected):
        monkeypatch.setenv("SICASM_STRICT", value)
        assert AssemblerConfig.from_env().strict_symbols is expected

    def test_encoding(self, monkeypatch):
        monkeypatch.setenv("SICASM_ENCODING", "utf-8")
        assert AssemblerConfig.from_env().encoding == "utf-8"

    def test_unknown_encoding_ignored(self, monkeypatch):
        monkeypatch.setenv("SICASM_ENCODING", "no-such-codec")
        assert AssemblerConfig.from_env().encoding == "latin-1"
