"""Tests for model tier resolution."""

from eri_chat.config.models import ModelTiers
from eri_chat.config.settings import Settings


class TestModelTiers:
    """Tests for provider-aware tier defaults."""

    def test_groq_defaults(self):
        tiers = ModelTiers.from_settings(Settings(_env_file=None))

        assert tiers == ModelTiers(
            primary="llama-3.3-70b-versatile",
            secondary="meta-llama/llama-4-scout-17b-16e-instruct",
            tertiary="llama-3.1-8b-instant",
        )

    def test_anthropic_uses_its_own_defaults(self):
        tiers = ModelTiers.from_settings(Settings(_env_file=None, llm_provider="anthropic"))

        assert tiers.primary.startswith("claude-")
        assert tiers.secondary.startswith("claude-")
        assert tiers.tertiary.startswith("claude-")

    def test_configured_model_wins(self):
        """Test an explicit tier is kept while unset tiers use provider defaults."""
        settings = Settings(_env_file=None, llm_provider="anthropic", primary_model="claude-opus-4-1")

        tiers = ModelTiers.from_settings(settings)

        assert tiers.primary == "claude-opus-4-1"
        assert tiers.secondary.startswith("claude-")

    def test_settings_copy_keeps_provider_defaults(self, settings):
        tiers = ModelTiers.from_settings(
            settings.model_copy(update={"llm_provider": "anthropic"})
        )

        assert tiers.primary.startswith("claude-")
