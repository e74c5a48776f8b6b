"""Application configuration helpers."""

from __future__ import annotations

from functools import lru_cache
import os
from pathlib import Path
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class AppConfig(BaseModel):
    """Runtime configuration loaded from environment variables."""

    model_config = ConfigDict(frozen=True)

    document_store_path: Optional[Path] = Field(
        default=None,
        description="Bundle JSON file or markdown vault directory loaded at startup",
    )
    min_node_size: float = Field(
        default=10.0, gt=0, le=50, description="Lower bound for rendered node size"
    )
    link_distance: int = Field(
        default=150, gt=0, description="Target spring length between linked nodes"
    )
    repulsion: float = Field(
        default=-300.0, le=0, description="Inter-node repulsion (negative gravity)"
    )
    color_by_connections: bool = Field(
        default=True,
        description="Color nodes by connection count instead of group tag",
    )
    show_labels: bool = Field(default=True)
    group_count: int = Field(default=5, ge=1, description="Buckets for group tags")
    graph_height: str = Field(default="750px")
    log_level: str = Field(default="INFO")
    cors_origins: List[str] = Field(default_factory=lambda: ["http://localhost:5173"])

    @field_validator("document_store_path", mode="before")
    @classmethod
    def _normalize_store_path(cls, value: str | Path | None) -> Optional[Path]:
        if value is None or value == "":
            return None
        path = value if isinstance(value, Path) else Path(value)
        return path.expanduser().resolve()

    @field_validator("log_level", mode="before")
    @classmethod
    def _normalize_log_level(cls, value: str) -> str:
        cleaned = str(value).strip().upper()
        if cleaned not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown LOG_LEVEL: {value}")
        return cleaned


def _read_env(key: str, default: Optional[str] = None) -> Optional[str]:
    return os.getenv(key, default)


def _read_flag(key: str, default: str = "true") -> bool:
    return (_read_env(key, default) or default).lower() not in {"0", "false", "no"}


@lru_cache(maxsize=1)
def get_config() -> AppConfig:
    """Load and cache application configuration."""
    origins = _read_env("CORS_ORIGINS", "http://localhost:5173") or ""

    return AppConfig(
        document_store_path=_read_env("DOCUMENT_STORE_PATH"),
        min_node_size=_read_env("MIN_NODE_SIZE", "10"),
        link_distance=_read_env("LINK_DISTANCE", "150"),
        repulsion=_read_env("REPULSION", "-300"),
        color_by_connections=_read_flag("COLOR_BY_CONNECTIONS"),
        show_labels=_read_flag("SHOW_LABELS"),
        group_count=_read_env("GROUP_COUNT", "5"),
        graph_height=_read_env("GRAPH_HEIGHT", "750px"),
        log_level=_read_env("LOG_LEVEL", "INFO"),
        cors_origins=[origin.strip() for origin in origins.split(",") if origin.strip()],
    )


def reload_config() -> AppConfig:
    """Clear cached config (useful for tests) and reload."""
    get_config.cache_clear()
    return get_config()


__all__ = ["AppConfig", "get_config", "reload_config"]
