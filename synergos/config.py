"""Global configuration — loaded from environment variables."""

from pydantic_settings import BaseSettings


class SynergosSettings(BaseSettings):
    log_level: str = "INFO"

    # Control loop cadences (seconds)
    health_interval_seconds: float = 5.0
    evolution_interval_seconds: float = 30.0
    tuning_interval_seconds: float = 15.0
    emergence_interval_seconds: float = 60.0
    agent_interval_seconds: float = 10.0

    # Initial switches
    autonomous_mode: bool = True
    learning_enabled: bool = True
    autogenesis_enabled: bool = True

    # Thresholds, clamped to [0, 1] when applied
    adaptation_threshold: float = 0.7
    synergy_threshold: float = 0.7

    # Capacity bounds (oldest entries dropped first)
    adaptation_history_limit: int = 100
    event_history_limit: int = 500
    max_emergent_behaviors: int = 200

    # Seed for the default signal source; None draws from OS entropy
    random_seed: int | None = None

    model_config = {"env_prefix": "SYNERGOS_"}


settings = SynergosSettings()
