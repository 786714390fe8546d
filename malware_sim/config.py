"""Configuration for the malware propagation simulator.

YAML configuration with deep-merge support:
  configs/default.yaml → user file → explicit overrides

Values here describe the collaborator layer (UI ranges, canvas geometry,
tick cadence).  The simulation core only guards against degenerate sizes
and probabilities; range checks live in :func:`validate_config`.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml

from .core.strain import DEFAULT_MULTIPLIERS, Strain


DEFAULT_CONFIG_PATH = Path(__file__).resolve().parent.parent / "configs" / "default.yaml"


# ═══════════════════════════════════════════════════════════════════════
# CONFIGURATION DATACLASSES
# ═══════════════════════════════════════════════════════════════════════

@dataclass
class CanvasSection:
    """Drawing surface geometry and node motion."""
    width: float = 700.0
    height: float = 500.0
    spawn_x_min: float = 50.0
    spawn_x_max: float = 650.0
    spawn_y_min: float = 50.0
    spawn_y_max: float = 450.0
    # Velocity flips once a node leaves this box
    bounce_x_min: float = 30.0
    bounce_x_max: float = 670.0
    bounce_y_min: float = 30.0
    bounce_y_max: float = 470.0
    max_speed: float = 0.25       # per velocity component, per tick


@dataclass
class NetworkSection:
    """Random contact graph parameters."""
    size: int = 20
    size_min: int = 10
    size_max: int = 50
    size_step: int = 5
    min_connections: int = 1     # connection attempts per node
    max_connections: int = 3


@dataclass
class InfectionSection:
    """Propagation parameters."""
    strain: str = "virus"
    probability: float = 0.3
    probability_min: float = 0.1
    probability_max: float = 1.0
    probability_step: float = 0.1
    multipliers: Dict[str, float] = field(
        default_factory=lambda: {s.value: m for s, m in DEFAULT_MULTIPLIERS.items()}
    )

    def strain_multipliers(self) -> Dict[Strain, float]:
        return {Strain.parse(k): float(v) for k, v in self.multipliers.items()}


@dataclass
class SimulationSection:
    """Driver cadence and reproducibility."""
    tick_interval_ms: int = 500
    seed: Optional[int] = None
    max_ticks: int = 1000         # cap for headless runs


@dataclass
class OutputSection:
    csv_filename: str = "simulation_results.csv"


@dataclass
class SimulationConfig:
    canvas: CanvasSection = field(default_factory=CanvasSection)
    network: NetworkSection = field(default_factory=NetworkSection)
    infection: InfectionSection = field(default_factory=InfectionSection)
    simulation: SimulationSection = field(default_factory=SimulationSection)
    output: OutputSection = field(default_factory=OutputSection)


# ═══════════════════════════════════════════════════════════════════════
# LOADING
# ═══════════════════════════════════════════════════════════════════════

def deep_merge(base: Dict, override: Dict) -> Dict:
    """Recursively merge *override* into *base* (mutates and returns *base*)."""
    for key, value in override.items():
        if (
            key in base
            and isinstance(base[key], dict)
            and isinstance(value, dict)
        ):
            deep_merge(base[key], value)
        else:
            base[key] = value
    return base


def _dict_to_section(section_cls, data: Dict) -> Any:
    """Convert a dict to a dataclass, ignoring unknown keys."""
    valid_fields = {f.name for f in dataclasses.fields(section_cls)}
    filtered = {k: v for k, v in data.items() if k in valid_fields}
    return section_cls(**filtered)


def _yaml_to_config(data: Dict) -> SimulationConfig:
    section_map = {
        'canvas': CanvasSection,
        'network': NetworkSection,
        'infection': InfectionSection,
        'simulation': SimulationSection,
        'output': OutputSection,
    }
    sections = {}
    for key, cls in section_map.items():
        if key in data and isinstance(data[key], dict):
            sections[key] = _dict_to_section(cls, data[key])
        else:
            sections[key] = cls()
    return SimulationConfig(**sections)


def validate_config(config: SimulationConfig) -> None:
    """Validate configuration constraints. Raises ValueError on failure."""
    c = config.canvas
    if not (c.bounce_x_min < c.bounce_x_max and c.bounce_y_min < c.bounce_y_max):
        raise ValueError("canvas bounce bounds must satisfy min < max")
    if not (c.spawn_x_min <= c.spawn_x_max and c.spawn_y_min <= c.spawn_y_max):
        raise ValueError("canvas spawn bounds must satisfy min <= max")
    if c.max_speed < 0:
        raise ValueError(f"canvas.max_speed must be >= 0, got {c.max_speed}")

    n = config.network
    if not (0 < n.size_min <= n.size_max):
        raise ValueError(
            f"network size range must satisfy 0 < min <= max, got [{n.size_min}, {n.size_max}]"
        )
    if not (n.size_min <= n.size <= n.size_max):
        raise ValueError(
            f"network.size must be in [{n.size_min}, {n.size_max}], got {n.size}"
        )
    if n.size_step <= 0:
        raise ValueError(f"network.size_step must be > 0, got {n.size_step}")
    if not (0 < n.min_connections <= n.max_connections):
        raise ValueError(
            "network connections must satisfy 0 < min_connections <= max_connections"
        )

    inf = config.infection
    Strain.parse(inf.strain)
    if not (0 < inf.probability_min <= inf.probability_max <= 1.0):
        raise ValueError(
            "infection probability range must satisfy 0 < min <= max <= 1, "
            f"got [{inf.probability_min}, {inf.probability_max}]"
        )
    if not (inf.probability_min <= inf.probability <= inf.probability_max):
        raise ValueError(
            f"infection.probability must be in [{inf.probability_min}, "
            f"{inf.probability_max}], got {inf.probability}"
        )
    multipliers = inf.strain_multipliers()
    missing = set(Strain) - set(multipliers)
    if missing:
        names = sorted(s.value for s in missing)
        raise ValueError(f"infection.multipliers missing strains: {names}")
    for strain, m in multipliers.items():
        if m < 0:
            raise ValueError(f"infection.multipliers.{strain.value} must be >= 0, got {m}")

    if config.simulation.tick_interval_ms <= 0:
        raise ValueError(
            f"simulation.tick_interval_ms must be > 0, got {config.simulation.tick_interval_ms}"
        )
    if config.simulation.max_ticks <= 0:
        raise ValueError(f"simulation.max_ticks must be > 0, got {config.simulation.max_ticks}")


def load_config(
    path: Optional[Union[str, Path]] = None,
    overrides: Optional[Dict] = None,
) -> SimulationConfig:
    """Load configuration from YAML and apply overrides.

    Args:
        path: YAML file; the shipped ``configs/default.yaml`` when omitted.
        overrides: Optional nested dict merged on top of the file.

    Returns:
        Validated SimulationConfig.

    Raises:
        FileNotFoundError: If *path* doesn't exist.
        ValueError: If validation fails.
    """
    path = Path(path) if path is not None else DEFAULT_CONFIG_PATH
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    with open(path) as f:
        config_dict = yaml.safe_load(f) or {}

    if overrides is not None:
        deep_merge(config_dict, overrides)

    config = _yaml_to_config(config_dict)
    validate_config(config)
    return config


def default_config() -> SimulationConfig:
    """Return a SimulationConfig with all default values."""
    config = SimulationConfig()
    validate_config(config)
    return config
