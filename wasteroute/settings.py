"""
File: wasteroute/settings.py
Purpose: Environment-backed configuration for the route engine service.
Key responsibilities:
- Parse HTTP host/port and tick cadence.
- Define truck motion and urgency weighting parameters.
- Provide the default demo task list.
"""

from dataclasses import dataclass
import os


DEFAULT_TASKS = [
    {"id": 1, "address": "123 Main St", "urgency": "urgent", "fill_level": 90},
    {"id": 2, "address": "456 Elm St", "urgency": "normal", "fill_level": 65},
    {"id": 3, "address": "789 Oak St", "urgency": "normal", "fill_level": 50},
    {"id": 4, "address": "321 Pine St", "urgency": "urgent", "fill_level": 85},
    {"id": 5, "address": "654 Maple Ave", "urgency": "normal", "fill_level": 40},
]


def _float_env(name: str, default: float) -> float:
    """Parse a float env var with a fallback."""
    raw = os.getenv(name, "")
    if raw == "":
        return default
    return float(raw)


def _optional_float_env(name: str) -> float | None:
    """Parse an optional float env var; empty means unset."""
    raw = os.getenv(name, "")
    if raw == "":
        return None
    return float(raw)


@dataclass(frozen=True)
class Settings:
    """Route engine configuration parsed from environment."""
    host: str = os.getenv("APP_HOST", "0.0.0.0")
    port: int = int(os.getenv("APP_PORT", "8000"))
    tick_interval_ms: int = int(os.getenv("TICK_INTERVAL_MS", "100"))
    truck_start_x: float = _float_env("TRUCK_START_X", 10.0)
    truck_start_y: float = _float_env("TRUCK_START_Y", 90.0)
    truck_speed: float = _float_env("TRUCK_SPEED", 2.0)
    # None: one step length (truck_speed).
    arrival_radius: float | None = _optional_float_env("ARRIVAL_RADIUS")
    urgent_factor: float = _float_env("URGENT_FACTOR", 0.5)
    normal_factor: float = _float_env("NORMAL_FACTOR", 1.0)
    pin_origin: float = _float_env("PIN_ORIGIN", 20.0)
    pin_spacing: float = _float_env("PIN_SPACING", 15.0)


settings = Settings()


def urgency_factors(cfg: Settings = settings) -> dict[str, float]:
    return {"urgent": cfg.urgent_factor, "normal": cfg.normal_factor}
