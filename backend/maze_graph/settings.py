from __future__ import annotations

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Graph and planner switches, read from the process environment or a `.env` file."""

    model_config = SettingsConfigDict(
        # Checked from the working directory: `.env` first, then one level up.
        env_file=(".env", "../.env"),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    out_dir: str = Field(default="out", alias="OUT_DIR")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    # Emit one structured event per Dijkstra run (cache miss).
    graph_log_tree_runs: bool = Field(default=True, alias="GRAPH_LOG_TREE_RUNS")

    # Root planner queries at the current vertex so scoring every candidate
    # costs a single tree computation.
    planner_prefer_start: bool = Field(default=True, alias="PLANNER_PREFER_START")

    @field_validator("log_level")
    @classmethod
    def _strip_level(cls, value: str) -> str:
        return str(value or "INFO").strip().upper() or "INFO"


settings = Settings()
