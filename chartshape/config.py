"""Configuration models using Pydantic for validation."""
from typing import Any, List, Literal, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator
import os


class GlobalConfig(BaseModel):
    """Global configuration settings."""
    log_level: str = "INFO"
    log_format: Literal["json", "text"] = "text"
    api_port: int = 8082
    bind_address: str = "0.0.0.0"

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v):
        """Accept standard logging level names in any case."""
        level = v.upper()
        if level not in ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]:
            raise ValueError(f"Invalid log level: {v}")
        return level


class LayoutConfig(BaseModel):
    """Defaults applied to every layout run unless overridden per call."""
    categories: Optional[List[Any]] = None
    stacked: bool = False
    max_ticks: Optional[int] = None
    sort_series: bool = True  # Sort uncategorised series by x

    @field_validator('max_ticks')
    @classmethod
    def validate_max_ticks(cls, v):
        """Tick limits cannot be negative."""
        if v is not None and v < 0:
            raise ValueError("max_ticks must be >= 0")
        return v


class MetricsConfig(BaseModel):
    """Prometheus self-metrics configuration."""
    enabled: bool = True
    prefix: str = "chartshape_"


class Config(BaseModel):
    """Root configuration model."""
    model_config = ConfigDict(populate_by_name=True)

    global_: GlobalConfig = Field(default_factory=GlobalConfig, alias="global")
    layout: LayoutConfig = Field(default_factory=LayoutConfig)
    metrics: MetricsConfig = Field(default_factory=MetricsConfig)


def load_config(config_path: str) -> Config:
    """Load and validate configuration from YAML file."""
    import yaml

    if not os.path.exists(config_path):
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    with open(config_path, 'r') as f:
        raw_config = yaml.safe_load(f) or {}

    # Apply environment variable overrides
    if env_log_level := os.getenv('LOG_LEVEL'):
        raw_config.setdefault('global', {})['log_level'] = env_log_level

    if env_port := os.getenv('CHARTSHAPE_API_PORT'):
        raw_config.setdefault('global', {})['api_port'] = env_port

    try:
        config = Config(**raw_config)
        return config
    except Exception as e:
        raise ValueError(f"Configuration validation failed: {e}")
