"""serverstats configuration — loaded from the environment via pydantic-settings."""

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings


class ServerStatsSettings(BaseSettings):
    """All serverstats configuration. Only explicit SERVERSTATS_* variables override defaults."""

    # --- Kernel interfaces ---
    proc_root: Path = Field(
        default=Path("/proc"),
        description="Mount point of procfs; stat and meminfo are read from here",
    )

    # --- Sampling ---
    sample_interval: float = Field(
        default=1.0,
        gt=0,
        description="Seconds between the two CPU counter samples",
    )
    top_n: int = Field(default=5, ge=1, description="Processes listed per ranking")

    # --- Logging ---
    log_level: str = Field(default="WARNING", description="Log level")
    log_format: str = Field(
        default="console",
        description="Log format: 'console' for terminals, 'json' for collectors",
    )

    model_config = {
        "env_prefix": "SERVERSTATS_",
        "extra": "ignore",
    }


settings = ServerStatsSettings()
