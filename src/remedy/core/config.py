"""Configuration management for remedy (remedy.toml parsing + defaults)."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

try:
    import tomllib
except ImportError:
    try:
        import tomli as tomllib  # type: ignore[no-redef]
    except ImportError:
        tomllib = None  # type: ignore[assignment]

CONFIG_FILENAME = "remedy.toml"
REMEDY_DIRNAME = ".remedy"


@dataclass
class EngineConfig:
    safety_mode: bool = True


@dataclass
class PlannerConfig:
    safe_confidence: float = 0.8
    risky_confidence: float = 0.6


@dataclass
class LearningConfig:
    persist: bool = True


@dataclass
class DetectorConfig:
    ignore: list[str] = field(default_factory=list)
    max_branches: int = 10
    quantum_density: int = 10


@dataclass
class FixConfig:
    backup_before_fix: bool = True


@dataclass
class RemedyConfig:
    """Complete remedy configuration."""

    engine: EngineConfig = field(default_factory=EngineConfig)
    planner: PlannerConfig = field(default_factory=PlannerConfig)
    learning: LearningConfig = field(default_factory=LearningConfig)
    detector: DetectorConfig = field(default_factory=DetectorConfig)
    fix: FixConfig = field(default_factory=FixConfig)


def load_config(project_path: Path | None = None) -> RemedyConfig:
    """Load configuration from remedy.toml if present, otherwise return defaults."""
    config = RemedyConfig()

    if project_path is None:
        project_path = Path.cwd()

    config_file = project_path / CONFIG_FILENAME
    if not config_file.exists():
        return config

    if tomllib is None:
        return config

    with open(config_file, "rb") as f:
        data = tomllib.load(f)

    if "engine" in data:
        e = data["engine"]
        if "safety_mode" in e:
            config.engine.safety_mode = bool(e["safety_mode"])

    if "planner" in data:
        p = data["planner"]
        for attr in ("safe_confidence", "risky_confidence"):
            if attr in p:
                setattr(config.planner, attr, float(p[attr]))

    if "learning" in data:
        lr = data["learning"]
        if "persist" in lr:
            config.learning.persist = bool(lr["persist"])

    if "detector" in data:
        d = data["detector"]
        if "ignore" in d:
            config.detector.ignore = list(d["ignore"])
        for attr in ("max_branches", "quantum_density"):
            if attr in d:
                setattr(config.detector, attr, int(d[attr]))

    if "fix" in data:
        fx = data["fix"]
        if "backup_before_fix" in fx:
            config.fix.backup_before_fix = bool(fx["backup_before_fix"])

    return config


def get_remedy_dir(project_path: Path | None = None) -> Path:
    """Get or create the .remedy directory."""
    if project_path is None:
        project_path = Path.cwd()
    remedy_dir = project_path / REMEDY_DIRNAME
    remedy_dir.mkdir(exist_ok=True)
    return remedy_dir
