"""
ShoalTracker Configuration
==========================

This module handles configuration loading for the shoal tracker.

Configuration Sources (in order of precedence):
    1. Environment variables (highest priority)
    2. config.yaml file
    3. Default values (lowest priority)

Environment Variable Mapping:
    SHOAL_AREAS_PATH   -> areas.definition_path
    SHOAL_ENTITY_KIND  -> tracking.entity_kind
    SHOAL_AGENT_PORT   -> server.port
    SHOAL_LOG_LEVEL    -> logging.level
    PORT               -> server.port (container platforms)

Example:
    from shoal_tracker.config import settings

    print(settings.tracking.entity_kind)
    print(settings.movement.stopped_threshold_ticks)
    print(settings.simplifier.max_waypoint_distance)
"""

import os
import logging
from pathlib import Path
from typing import Optional

import yaml
from pydantic import BaseModel, Field


logger = logging.getLogger(__name__)


# =============================================================================
# Configuration Models
# =============================================================================

class AgentConfig(BaseModel):
    """Service identification configuration."""

    name: str = Field(default="shoal-tracker-agent", description="Service name")
    version: str = Field(default="v0.1.0", description="Service version")


class TrackingConfig(BaseModel):
    """Entity tracking configuration."""

    entity_kind: str = Field(
        default="shoal",
        min_length=1,
        description="Scene kind of the tracked entity",
    )
    log_every_n_ticks: int = Field(
        default=100,
        ge=1,
        description="Periodic summary interval (ticks)",
    )


class AreasConfig(BaseModel):
    """Area / duration table configuration."""

    definition_path: str = Field(
        default="./data/areas/fishing_areas.json",
        description="Path to the area table JSON file",
    )


class MovementConfig(BaseModel):
    """Movement window hysteresis."""

    stopped_threshold_ticks: int = Field(
        default=2,
        ge=1,
        description="Ticks at the same position to call a stop",
    )
    movement_threshold_ticks: int = Field(
        default=5,
        ge=1,
        description="Moving ticks required before a stop counts",
    )


class PathConfig(BaseModel):
    """Path recorder configuration."""

    waypoint_tolerance: int = Field(
        default=2,
        ge=1,
        description="Minimum distance between recorded waypoints (tiles)",
    )
    stop_dwell_ticks: int = Field(
        default=5,
        ge=1,
        description="Dwell ticks that mark a stop point",
    )
    min_path_points: int = Field(
        default=10,
        ge=1,
        description="Waypoints required for an exportable path",
    )
    area_margin: int = Field(
        default=10,
        ge=0,
        description="Margin around the exported bounding area (tiles)",
    )


class SimplifierConfig(BaseModel):
    """Path simplifier thresholds."""

    max_waypoint_distance: float = Field(default=30.0, gt=0)
    collinear_threshold: float = Field(default=1.0, ge=0)
    deviation_threshold: float = Field(default=1.5, ge=0)
    slope_tolerance: float = Field(default=0.05, ge=0)


class ServerConfig(BaseModel):
    """Server configuration."""

    host: str = Field(default="0.0.0.0", description="Bind host")
    port: int = Field(default=8002, ge=1, le=65535, description="Bind port")


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = Field(default="INFO", description="Log level")
    format: str = Field(default="json", description="Log format: json or text")


class Settings(BaseModel):
    """
    Main settings class for the shoal tracker.

    Loads configuration from YAML file and environment variables.
    Environment variables take precedence over file values.
    """

    agent: AgentConfig = Field(default_factory=AgentConfig)
    tracking: TrackingConfig = Field(default_factory=TrackingConfig)
    areas: AreasConfig = Field(default_factory=AreasConfig)
    movement: MovementConfig = Field(default_factory=MovementConfig)
    path: PathConfig = Field(default_factory=PathConfig)
    simplifier: SimplifierConfig = Field(default_factory=SimplifierConfig)
    server: ServerConfig = Field(default_factory=ServerConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


# =============================================================================
# Configuration Loading
# =============================================================================

def load_config(config_path: Optional[str] = None) -> Settings:
    """
    Load configuration from YAML file and environment variables.

    Priority (highest to lowest):
        1. Environment variables
        2. YAML config file
        3. Default values

    Args:
        config_path: Path to config.yaml. If None, searches common locations.

    Returns:
        Settings: Loaded configuration
    """
    if config_path is None:
        search_paths = [
            Path("config.yaml"),
            Path("config.yml"),
            Path(__file__).parent.parent.parent / "config.yaml",
        ]
        for path in search_paths:
            if path.exists():
                config_path = str(path)
                break

    config_data = {}
    if config_path and Path(config_path).exists():
        logger.info(f"Loading config from: {config_path}")
        with open(config_path, "r") as f:
            config_data = yaml.safe_load(f) or {}
    else:
        logger.warning("No config file found, using defaults and environment variables")

    _apply_env_overrides(config_data)

    return Settings.model_validate(config_data)


def _apply_env_overrides(config_data: dict) -> None:
    """Apply environment variable overrides to config data."""

    if env_areas := os.environ.get("SHOAL_AREAS_PATH"):
        config_data.setdefault("areas", {})["definition_path"] = env_areas

    if env_kind := os.environ.get("SHOAL_ENTITY_KIND"):
        config_data.setdefault("tracking", {})["entity_kind"] = env_kind

    # Server settings (container platforms use PORT)
    if env_port := os.environ.get("PORT"):
        config_data.setdefault("server", {})["port"] = int(env_port)
    elif env_port := os.environ.get("SHOAL_AGENT_PORT"):
        config_data.setdefault("server", {})["port"] = int(env_port)

    if env_log := os.environ.get("SHOAL_LOG_LEVEL"):
        config_data.setdefault("logging", {})["level"] = env_log


def resolve_areas_path(settings: Settings) -> Path:
    """
    Resolve the area table path.

    Relative paths are tried against the working directory first, then
    against the project root.
    """
    path = Path(settings.areas.definition_path)
    if path.is_absolute() or path.exists():
        return path
    return Path(__file__).parent.parent.parent / path


def setup_logging(settings: Settings) -> None:
    """Configure logging based on settings."""
    log_level = getattr(logging, settings.logging.level.upper(), logging.INFO)

    if settings.logging.format == "json":
        log_format = '{"time": "%(asctime)s", "level": "%(levelname)s", "module": "%(name)s", "message": "%(message)s"}'
    else:
        log_format = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    logging.basicConfig(
        level=log_level,
        format=log_format,
        datefmt="%Y-%m-%dT%H:%M:%S",
    )


# =============================================================================
# Global Settings Instance
# =============================================================================

# Global settings instance - loaded on import
settings = load_config()
setup_logging(settings)
