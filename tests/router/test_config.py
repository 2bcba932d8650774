"""Tests for router configuration and persistence."""

import json

import pytest

from intent_router.config.loader import get_config_path, load_settings, save_settings
from intent_router.config.schema import ClassifierConfig, RouterConfig, RouterSettings
from intent_router.llm_router import LLMClassifier
from intent_router.models import ConversationTurn, Tool


class TestRouterConfig:
    """Test per-call routing configuration."""

    def test_defaults(self):
        """Test default provider, policy and threshold."""
        config = RouterConfig()
        assert config.provider == "bedrock"
        assert config.preset is None
        assert config.policy == "aggressive"
        assert config.fallback_threshold == 0.4
        assert config.escalate_on_pronoun is True
        assert config.classifier is None

    def test_camel_case_keys_and_tool_coercion(self):
        """Test camelCase keys and capability-name tool lists."""
        config = RouterConfig.model_validate({
            "availableTools": ["web_search", "bogus", "execute_code"],
            "userSelectedTools": ["artifacts"],
            "fallbackThreshold": 0.5,
        })
        assert config.available_tools == [Tool.WEB_SEARCH, Tool.CODE_INTERPRETER]
        assert config.user_selected_tools == [Tool.ARTIFACTS]
        assert config.auto_enabled_tools == []
        assert config.fallback_threshold == 0.5

    def test_invalid_policy(self):
        """Test unknown policies are rejected."""
        with pytest.raises(ValueError, match="Unknown scoring policy"):
            RouterConfig(policy="reckless")

    def test_invalid_provider(self):
        """Test unknown providers are rejected."""
        with pytest.raises(ValueError, match="Unknown provider"):
            RouterConfig(provider="azure")

    def test_to_context(self):
        """Test building a QueryContext from the config."""
        config = RouterConfig(
            available_tools=[Tool.FILE_SEARCH],
            conversation_history=[{"role": "user", "content": "hello"}],
            attached_files={"upload_intents": ["file_search"]},
        )
        ctx = config.to_context("summarize it")

        assert ctx.query == "summarize it"
        assert ctx.available_tools == [Tool.FILE_SEARCH]
        assert ctx.conversation_history == [ConversationTurn(role="user", content="hello")]
        assert ctx.attached_files.upload_intents[0].value == "file_search"

    def test_classifier_not_dumped(self):
        """Test the classifier callable is excluded from dumps."""
        config = RouterConfig(classifier=lambda prompt: "{}")
        assert "classifier" not in config.model_dump()


class TestRouterSettings:
    """Test persisted settings."""

    def test_defaults(self):
        """Test persisted defaults match the logging default."""
        settings = RouterSettings()
        assert settings.log_level == "WARNING"
        assert settings.classifier.enabled is False

    def test_router_config_overrides(self):
        """Test settings defaults plus per-call overrides."""
        settings = RouterSettings(provider="openai", policy="conservative")
        config = settings.router_config(preset="economy", available_tools=["artifacts"])

        assert config.provider == "openai"
        assert config.policy == "conservative"
        assert config.preset == "economy"
        assert config.available_tools == [Tool.ARTIFACTS]

    def test_env_override(self, monkeypatch):
        """Test environment variables with nested keys."""
        monkeypatch.setenv("INTENT_ROUTER_PROVIDER", "openai")
        monkeypatch.setenv("INTENT_ROUTER_CLASSIFIER__TIMEOUT_MS", "800")

        settings = RouterSettings()
        assert settings.provider == "openai"
        assert settings.classifier.timeout_ms == 800

    def test_build_classifier_disabled(self):
        """Test no classifier unless enabled."""
        assert RouterSettings().build_classifier() is None

    def test_build_classifier_enabled(self):
        """Test an enabled classifier is built from settings."""
        settings = RouterSettings(
            classifier=ClassifierConfig(enabled=True, model="gpt-4o", timeout_ms=900, secondary_model="gpt-4o-mini")
        )
        classifier = settings.build_classifier()

        assert isinstance(classifier, LLMClassifier)
        assert classifier.model == "gpt-4o"
        assert classifier.timeout_ms == 900
        assert classifier.secondary_model == "gpt-4o-mini"
        assert classifier.provider.get_default_model() == "gpt-4o"


class TestLoader:
    """Test loading and saving settings files."""

    def test_default_path(self):
        """Test the default config location."""
        assert get_config_path().parts[-2:] == (".intent-router", "config.json")

    def test_round_trip(self, tmp_path):
        """Test saved settings load back unchanged."""
        path = tmp_path / "nested" / "config.json"
        settings = RouterSettings(
            provider="openai",
            preset="premium",
            classifier=ClassifierConfig(enabled=True, model="gpt-4o", secondary_model="gpt-4o-mini"),
        )
        save_settings(settings, path)

        data = json.loads(path.read_text())
        assert data["classifier"]["timeoutMs"] == 1500
        assert data["classifier"]["secondaryModel"] == "gpt-4o-mini"
        assert path.stat().st_mode & 0o777 == 0o600

        loaded = load_settings(path)
        assert loaded.provider == "openai"
        assert loaded.preset == "premium"
        assert loaded.classifier.enabled is True
        assert loaded.classifier.secondary_model == "gpt-4o-mini"

    def test_missing_file(self, tmp_path):
        """Test a missing file gives defaults."""
        settings = load_settings(tmp_path / "absent.json")
        assert settings.policy == "aggressive"

    def test_corrupted_file(self, tmp_path):
        """Test invalid JSON falls back to defaults."""
        path = tmp_path / "config.json"
        path.write_text("{not json")
        assert load_settings(path).provider == "bedrock"

    def test_invalid_values(self, tmp_path):
        """Test invalid values fall back to defaults."""
        path = tmp_path / "config.json"
        path.write_text(json.dumps({"provider": "azure"}))
        assert load_settings(path).provider == "bedrock"
