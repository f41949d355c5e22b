"""Project-level configuration and path helpers."""

from pathlib import Path
from typing import Union

SOURCE_DIR_NAME = "02_src"


def find_project_root(module_file: str | Path, cwd: Path | None = None) -> Path:
    """Checkout root when running from 02_src, otherwise the working directory."""
    package_parent = Path(module_file).resolve().parent.parent
    if package_parent.name == SOURCE_DIR_NAME:
        return package_parent.parent
    return cwd or Path.cwd()


PROJECT_ROOT = find_project_root(__file__)
LOGS_DIR = PROJECT_ROOT / "04_logs"
DEFAULT_LOG_PATH = LOGS_DIR / "faultwatch.log"

DEFAULT_SWEEP_INTERVAL = 1.0
DEFAULT_MAX_WORKERS = 4

DETECTION_SWEEP = "sweep"
DETECTION_RECLAMATION = "reclamation"
DETECTION_MODES = (DETECTION_SWEEP, DETECTION_RECLAMATION)


PathLike = Union[str, Path]


def resolve_log_path(env_value: PathLike | None = None) -> Path:
    """Resolve LOG_FILE to an absolute path."""
    if not env_value:
        return DEFAULT_LOG_PATH

    candidate = Path(env_value)
    return candidate if candidate.is_absolute() else PROJECT_ROOT / candidate


def resolve_sweep_interval(env_value: str | None = None) -> float:
    """Parse FAULTWATCH_SWEEP_INTERVAL (seconds)."""
    if not env_value:
        return DEFAULT_SWEEP_INTERVAL

    interval = float(env_value)
    if interval <= 0:
        raise ValueError(f"Sweep interval must be positive, got {env_value!r}")
    return interval


def resolve_max_workers(env_value: str | None = None) -> int:
    """Parse FAULTWATCH_MAX_WORKERS."""
    if not env_value:
        return DEFAULT_MAX_WORKERS

    workers = int(env_value)
    if workers < 1:
        raise ValueError(f"Worker count must be at least 1, got {env_value!r}")
    return workers


def resolve_detection_mode(env_value: str | None = None) -> str:
    """Validate FAULTWATCH_DETECTION."""
    if not env_value:
        return DETECTION_SWEEP

    mode = env_value.strip().lower()
    if mode not in DETECTION_MODES:
        raise ValueError(
            f"Unknown detection mode {env_value!r}, expected one of {DETECTION_MODES}"
        )
    return mode
