from __future__ import annotations

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    app_name: str = "LotFit Site Planner"
    debug: bool = True
    log_level: str = "INFO"
    cors_origins: list[str] = ["http://localhost:3000", "http://localhost:5173"]
    default_front_setback: float = 4.0  # m
    default_side_setback: float = 3.0  # m
    default_rear_setback: float = 3.0  # m
    default_fsr_area: float = 300.0  # m²
    containment_tolerance: float = 1e-6  # m - touching edges do not exceed
    side_mismatch_threshold: float = 0.5  # relative error per side
    snap_tolerance_degrees: float = 2.0

    class Config:
        env_prefix = "LOTFIT_"


settings = Settings()
