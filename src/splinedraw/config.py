"""
Configuration management for splinedraw.

Loads YAML configuration with sensible defaults for curve style, graph
decomposition, SVG export and tracing.
"""

import os
from dataclasses import asdict, dataclass, field

import yaml

from splinedraw.models import (
    DEFAULT_SEGMENTS, BSplineStyle, CatmullRomStyle, FilletStyle, LinearStyle,
)


@dataclass
class StyleConfig:
    """Default curve style applied when a scene does not carry one."""
    kind: str = "catmull_rom"  # "linear", "catmull_rom", "bspline" or "fillet"
    segments: int = DEFAULT_SEGMENTS
    tension: float = 0.5
    degree: int = 3
    radius_mode: str = "relative"  # "relative" or "absolute"
    radius_value: float = 0.5
    exact: bool = False
    log_segments: bool = False


@dataclass
class DecomposeConfig:
    """Configuration for graph decomposition and junction trimming."""
    trim_junction_ends: bool = True
    trim_ratio: float = 0.25
    tie_epsilon: float = 1e-9


@dataclass
class ExportConfig:
    """Configuration for SVG export."""
    stroke_width: float = 1.5
    stroke_color: str = "black"
    fill_color: str = "#3B82F6"
    fill_opacity: float = 0.3
    fill_faces: bool = False
    show_points: bool = False
    point_radius: float = 2.0
    margin: float = 10.0


@dataclass
class TracingConfig:
    """Configuration for runtime tracing."""
    enabled: bool = False
    level: str = "INFO"
    file_path: str = None
    json_output: bool = False


@dataclass
class RenderConfig:
    """Complete configuration."""
    style: StyleConfig = field(default_factory=StyleConfig)
    decompose: DecomposeConfig = field(default_factory=DecomposeConfig)
    export: ExportConfig = field(default_factory=ExportConfig)
    tracing: TracingConfig = field(default_factory=TracingConfig)


SECTIONS = ("style", "decompose", "export", "tracing")


def load_config(config_path=None):
    """
    Load configuration from YAML file.

    Falls back to defaults for any missing values; unknown keys are ignored.
    """
    config = RenderConfig()

    if config_path and os.path.exists(config_path):
        with open(config_path, "r", encoding="utf-8") as f:
            yaml_data = yaml.safe_load(f) or {}

        config = _merge_config(config, yaml_data)

    return config


def _merge_config(config, yaml_data):
    """Merge YAML data into config dataclass."""
    for name in SECTIONS:
        section = getattr(config, name)
        for key, value in (yaml_data.get(name) or {}).items():
            if hasattr(section, key):
                setattr(section, key, value)
    return config


def save_default_config(path):
    """Save default configuration to YAML file for reference."""
    config = RenderConfig()
    yaml_data = {name: asdict(getattr(config, name)) for name in SECTIONS}
    yaml_data["tracing"].pop("file_path")

    with open(path, "w", encoding="utf-8") as f:
        yaml.dump(yaml_data, f, default_flow_style=False, sort_keys=False)


def style_from_config(config):
    """
    Build the curve style model described by the `style` section.

    Raises ValueError for an unknown style kind.
    """
    style = config.style
    if style.kind == "linear":
        return LinearStyle(segments_per_edge=style.segments)
    if style.kind == "catmull_rom":
        return CatmullRomStyle(tension=style.tension, segments_per_edge=style.segments)
    if style.kind == "bspline":
        return BSplineStyle(degree=style.degree, segments_per_piece=style.segments)
    if style.kind == "fillet":
        return FilletStyle(
            mode=style.radius_mode,
            value=style.radius_value,
            segments_per_arc=style.segments,
            exact=style.exact,
        )
    raise ValueError(f"Unknown curve style kind: {style.kind}")
