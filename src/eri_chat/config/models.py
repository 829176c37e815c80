"""Model tier configuration for the fallback cascade."""

from dataclasses import dataclass

from eri_chat.config.settings import Settings


# Tier defaults per provider; the Settings field defaults are the Groq ids
PROVIDER_DEFAULT_TIERS: dict[str, dict[str, str]] = {
    "anthropic": {
        "primary_model": "claude-sonnet-4-5",
        "secondary_model": "claude-sonnet-4-0",
        "tertiary_model": "claude-haiku-4-5",
    },
}


@dataclass(frozen=True)
class ModelTiers:
    """
    Model ids for each tier.

    - primary: full capability, tool-aware
    - secondary: tool-aware, less throughput headroom
    - tertiary: fast last resort, tools optional
    """

    primary: str
    secondary: str
    tertiary: str

    @classmethod
    def from_settings(cls, settings: Settings) -> "ModelTiers":
        """
        Resolve tiers for the configured provider.

        Explicitly configured model ids always win. Unset tiers fall back to
        the provider's own defaults.
        """
        defaults = PROVIDER_DEFAULT_TIERS.get(settings.llm_provider, {})

        def pick(field: str) -> str:
            if field in settings.model_fields_set or field not in defaults:
                return getattr(settings, field)
            return defaults[field]

        return cls(
            primary=pick("primary_model"),
            secondary=pick("secondary_model"),
            tertiary=pick("tertiary_model"),
        )
