"""
Engine configuration.

Defaults live on the frozen dataclass; a YAML file may override them:

    default_fee_bps: 30
    chain_id: yieldsplit-local
    require_signatures: true
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any

import yaml

from ..core.fixed_point import BPS_DENOM
from ..core.pool.types import DEFAULT_FEE_BPS


class ConfigError(ValueError):
    pass


@dataclass(frozen=True)
class EngineConfig:
    # Fee stamped onto pools at initialize (fee governance is not modeled).
    default_fee_bps: int = DEFAULT_FEE_BPS
    # Signature replay protection: binds operation signatures to one deployment.
    chain_id: str = "yieldsplit-local"
    # True: operations needing authorization must carry a BLS signature.
    # False: the principal must be the host-verified transaction sender.
    require_signatures: bool = True

    def __post_init__(self) -> None:
        if not isinstance(self.default_fee_bps, int) or isinstance(self.default_fee_bps, bool):
            raise ConfigError("default_fee_bps must be an int")
        if not (0 <= self.default_fee_bps <= BPS_DENOM):
            raise ConfigError(f"default_fee_bps must be in [0, {BPS_DENOM}]: {self.default_fee_bps}")
        if not isinstance(self.chain_id, str) or not self.chain_id.strip():
            raise ConfigError("chain_id must be a non-empty string")
        if not isinstance(self.require_signatures, bool):
            raise ConfigError("require_signatures must be a bool")


_KEYS = frozenset(f.name for f in fields(EngineConfig))


def config_from_mapping(raw: Any) -> EngineConfig:
    if raw is None:
        return EngineConfig()
    if not isinstance(raw, dict):
        raise ConfigError("config must be a mapping")
    unknown = sorted(set(raw) - _KEYS)
    if unknown:
        raise ConfigError(f"unknown config keys: {', '.join(map(str, unknown))}")
    return EngineConfig(**raw)


def load_config(path: Path | str) -> EngineConfig:
    """Read an `EngineConfig` from YAML (fail-closed on unknown keys / wrong types)."""
    text = Path(path).read_text(encoding="utf-8")
    try:
        raw = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"invalid YAML in {path}: {exc}") from exc
    return config_from_mapping(raw)
