"""
Configuration management for the connector router with Pydantic validation
"""

from typing import Dict, Optional, Any, Literal, Union
from pathlib import Path
import os
import re
import yaml
from pydantic import BaseModel, Field, ConfigDict, model_validator

from .exceptions import ConfigError


# ============================================================================
# Pydantic Models for Configuration Validation
# ============================================================================

class RoutingSettings(BaseModel):
    """Orthogonal routing settings"""
    clearance: float = Field(20.0, gt=0, description="Default gap kept between a route and an endpoint shape")
    dedup_tolerance: float = Field(0.02, gt=0, description="Distance under which candidate points are merged")
    merge_tolerance: float = Field(0.02, gt=0, description="Tolerance when merging collinear route points")
    collinear_tolerance: float = Field(0.05, gt=0, description="Tolerance for collapsing collinear runs after edits")
    alignment_snap: float = Field(10.0, ge=0, description="Distance under which a dragged segment snaps to a fixed one")
    free_end_approach: float = Field(20.0, gt=0, description="Synthetic approach length for unattached ends")
    degenerate_nudge: float = Field(10.0, gt=0, description="Offset applied to zero-length target lines")


class AnchorSettings(BaseModel):
    """Anchor resolution and snapping settings"""
    probe_offset: float = Field(10.0, gt=0, description="Distance beyond the outline for anchor probes")
    snap_radius: float = Field(8.0, gt=0, description="Snap radius in screen pixels")
    hit_expand: float = Field(10.0, ge=0, description="Expansion of a shape's bound for hit testing")
    pair_tie_slack: float = Field(0.1, ge=0, description="Slack used when comparing anchor pair distances")


class CurveSettings(BaseModel):
    """Curve-mode control point settings"""
    min_control_length: float = Field(50.0, gt=0, description="Minimum handle length at attached ends")
    attached_handle_length: float = Field(100.0, gt=0, description="Minimum handle length for ends on shapes")

    @model_validator(mode='after')
    def validate_lengths(self):
        """Ensure attached handles are not shorter than the minimum control length"""
        if self.attached_handle_length < self.min_control_length:
            raise ValueError(
                f"attached_handle_length ({self.attached_handle_length}) cannot be smaller than "
                f"min_control_length ({self.min_control_length})"
            )
        return self


class LoggingSettings(BaseModel):
    """Logging settings"""
    level: Literal['DEBUG', 'INFO', 'WARNING', 'ERROR'] = Field('INFO', description="Console log level")
    file: Optional[str] = Field(None, description="Optional log file path")


class RouterConfigModel(BaseModel):
    """Pydantic model for router configuration validation"""
    model_config = ConfigDict(extra='ignore')  # Ignore extra fields in YAML

    version: Optional[Union[int, float, str]] = None
    description: Optional[str] = None

    routing: RoutingSettings = Field(default_factory=RoutingSettings)
    anchors: AnchorSettings = Field(default_factory=AnchorSettings)
    curve: CurveSettings = Field(default_factory=CurveSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)


# ============================================================================
# Environment Variable Substitution
# ============================================================================

def _substitute_env_vars(value: Any) -> Any:
    """
    Recursively substitute environment variables in configuration values

    Supports ``${VAR_NAME}``, ``$VAR_NAME`` and ``${VAR_NAME:-default_value}``.

    Args:
        value: Configuration value (can be str, dict, list, or other)

    Returns:
        Value with environment variables substituted
    """
    if isinstance(value, str):
        def replace_with_default(match):
            var_name = match.group(1)
            default_value = match.group(3)
            env_value = os.environ.get(var_name)
            if env_value is not None:
                return env_value
            elif default_value is not None:
                return default_value
            else:
                raise ConfigError(f"Environment variable '{var_name}' is not set and no default value provided")

        value = re.sub(r'\$\{([A-Za-z_][A-Za-z0-9_]*)(:-([^}]*))?\}', replace_with_default, value)

        def replace_simple(match):
            var_name = match.group(1)
            env_value = os.environ.get(var_name)
            if env_value is not None:
                return env_value
            raise ConfigError(f"Environment variable '{var_name}' is not set")

        return re.sub(r'\$([A-Za-z_][A-Za-z0-9_]*)', replace_simple, value)

    elif isinstance(value, dict):
        return {k: _substitute_env_vars(v) for k, v in value.items()}

    elif isinstance(value, list):
        return [_substitute_env_vars(item) for item in value]

    return value


# ============================================================================
# RouterConfig Class (wrapper around Pydantic model)
# ============================================================================

class RouterConfig:
    """Configuration class for routing parameters with validation"""

    def __init__(self, config_dict: Optional[Dict] = None):
        """Initialize from dictionary (parsed from YAML) with Pydantic validation"""
        config_dict = _substitute_env_vars(config_dict or {})

        try:
            self._model = RouterConfigModel(**config_dict)
        except Exception as e:
            raise ConfigError(f"Configuration validation failed: {str(e)}") from e

        self.version = self._model.version
        self.description = self._model.description

        # Routing
        routing = self._model.routing
        self.clearance = routing.clearance
        self.dedup_tolerance = routing.dedup_tolerance
        self.merge_tolerance = routing.merge_tolerance
        self.collinear_tolerance = routing.collinear_tolerance
        self.alignment_snap = routing.alignment_snap
        self.free_end_approach = routing.free_end_approach
        self.degenerate_nudge = routing.degenerate_nudge

        # Anchors
        anchors = self._model.anchors
        self.anchor_probe_offset = anchors.probe_offset
        self.snap_radius = anchors.snap_radius
        self.hit_expand = anchors.hit_expand
        self.pair_tie_slack = anchors.pair_tie_slack

        # Curve
        self.min_control_length = self._model.curve.min_control_length
        self.attached_handle_length = self._model.curve.attached_handle_length

        # Logging
        self.log_level = self._model.logging.level
        self.log_file = Path(self._model.logging.file) if self._model.logging.file else None

    @classmethod
    def default(cls) -> 'RouterConfig':
        return cls({})

    @classmethod
    def from_yaml(cls, config_path: str) -> 'RouterConfig':
        """Load configuration from YAML file"""
        path = Path(config_path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")

        with open(path, 'r', encoding='utf-8') as f:
            try:
                config_dict = yaml.safe_load(f) or {}
            except yaml.YAMLError as e:
                raise ConfigError(f"Invalid YAML in {config_path}: {e}") from e

        if not isinstance(config_dict, dict):
            raise ConfigError(f"Config file {config_path} must contain a mapping at the top level")

        return cls(config_dict)

    def to_dict(self) -> Dict[str, Any]:
        return self._model.model_dump()

    def to_yaml(self) -> str:
        return yaml.safe_dump(self.to_dict(), sort_keys=False)

    def __repr__(self):
        return f"RouterConfig(clearance={self.clearance}, snap_radius={self.snap_radius})"


DEFAULT_CONFIG = RouterConfig.default()
