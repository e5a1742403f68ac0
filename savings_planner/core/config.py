from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Any, Dict, Tuple

import yaml
from dotenv import load_dotenv


@dataclass(frozen=True)
class Settings:
    env: str
    log_level: str

    catalog_path: str
    currency: str

    default_target_amount: float
    default_target_age: int
    default_beneficiary_ages: Tuple[int, ...]

    conservative_percent: float
    optimistic_percent: float


def _deep_get(d: Dict[str, Any], path: str, default=None):
    cur = d
    for part in path.split("."):
        if not isinstance(cur, dict) or part not in cur:
            return default
        cur = cur[part]
    return cur


def _parse_ages(value: Any) -> Tuple[int, ...]:
    if isinstance(value, str):
        parts = [p.strip() for p in value.split(",")]
        return tuple(int(p) for p in parts if p)
    return tuple(int(v) for v in (value or []))


def load_settings(config_path: str = "config.yaml") -> Settings:
    """
    Loads config.yaml + overrides from .env/environment variables.
    """
    load_dotenv()  # loads .env into env vars

    cfg: Dict[str, Any] = {}
    if os.path.exists(config_path):
        with open(config_path, "r", encoding="utf-8") as f:
            cfg = yaml.safe_load(f) or {}

    # Empty env vars count as "not set" so they never mask config.yaml.
    def _env_or_cfg(key: str, cfg_path: str, default):
        v = os.getenv(key)
        if v is None:
            return _deep_get(cfg, cfg_path, default)
        v = v.strip()
        return _deep_get(cfg, cfg_path, default) if v == "" else v

    env = _env_or_cfg("APP_ENV", "app.env", "dev")
    log_level = _env_or_cfg("LOG_LEVEL", "app.log_level", "INFO")

    catalog_path = _env_or_cfg("CATALOG_PATH", "paths.catalog", "data/asset_catalog.yaml")
    currency = str(_env_or_cfg("CURRENCY", "plan.currency", "USD")).strip().upper()

    default_target_amount = float(_env_or_cfg("DEFAULT_TARGET_AMOUNT", "plan.target_amount", 75000))
    default_target_age = int(_env_or_cfg("DEFAULT_TARGET_AGE", "plan.target_age", 17))
    default_beneficiary_ages = _parse_ages(_env_or_cfg("DEFAULT_BENEFICIARY_AGES", "plan.beneficiary_ages", [5, 3]))

    conservative_percent = float(_env_or_cfg("CONSERVATIVE_PERCENT", "scenarios.conservative_percent", 25))
    optimistic_percent = float(_env_or_cfg("OPTIMISTIC_PERCENT", "scenarios.optimistic_percent", 10))

    return Settings(
        env=env,
        log_level=log_level,
        catalog_path=catalog_path,
        currency=currency,
        default_target_amount=default_target_amount,
        default_target_age=default_target_age,
        default_beneficiary_ages=default_beneficiary_ages,
        conservative_percent=conservative_percent,
        optimistic_percent=optimistic_percent,
    )


# Optional convenience singleton
SETTINGS = load_settings()
