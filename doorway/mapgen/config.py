import hashlib
import os
import random
from dataclasses import asdict, dataclass, fields
from typing import Optional

from .errors import ConfigError

SEED_MAX_INT = 9223372036854775807
# recursion depth equals max_rooms
MAX_ROOMS_LIMIT = 500

ENV_PREFIX = "MAPGEN_"


@dataclass
class GeneratorConfig:
    max_rooms: int = 25
    iteration_budget: int = 20000
    max_bound_span: int = 7
    min_path_length: int = 6
    seed: Optional[int] = None
    restore_bounds_on_backtrack: bool = True
    enable_metrics: bool = True
    attempts: int = 3

    def validate(self) -> "GeneratorConfig":
        if self.max_rooms < 1:
            raise ConfigError("max_rooms", "must be >= 1")
        if self.max_rooms > MAX_ROOMS_LIMIT:
            raise ConfigError("max_rooms", f"must be <= {MAX_ROOMS_LIMIT}")
        if self.iteration_budget < 1:
            raise ConfigError("iteration_budget", "must be >= 1")
        if self.max_bound_span < 0:
            raise ConfigError("max_bound_span", "must be >= 0")
        if self.min_path_length < 0:
            raise ConfigError("min_path_length", "must be >= 0")
        if self.attempts < 1:
            raise ConfigError("attempts", "must be >= 1")
        return self

    def replace(self, **overrides) -> "GeneratorConfig":
        data = asdict(self)
        data.update({k: v for k, v in overrides.items() if v is not None})
        return GeneratorConfig(**data)

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_mapping(cls, mapping, base: Optional["GeneratorConfig"] = None) -> "GeneratorConfig":
        """Overlay ``MAPGEN_*`` keys from ``mapping`` (env or Flask config) onto ``base``."""
        cfg = base or cls()
        overrides = {}
        for f in fields(cls):
            key = ENV_PREFIX + f.name.upper()
            if key not in mapping:
                continue
            raw = mapping[key]
            if f.name in ("restore_bounds_on_backtrack", "enable_metrics"):
                overrides[f.name] = _as_bool(raw)
            elif f.name == "seed":
                overrides[f.name] = coerce_seed(raw)
            else:
                try:
                    overrides[f.name] = int(raw)
                except (TypeError, ValueError):
                    raise ConfigError(f.name, f"expected integer, got {raw!r}")
        return cfg.replace(**overrides)

    @classmethod
    def from_env(cls, base: Optional["GeneratorConfig"] = None) -> "GeneratorConfig":
        return cls.from_mapping(os.environ, base)

    @classmethod
    def from_app_config(cls, base: Optional["GeneratorConfig"] = None) -> "GeneratorConfig":
        """Environment overrides, then Flask app config (highest precedence) if an app context is active."""
        cfg = cls.from_env(base)
        from flask import current_app, has_app_context
        if has_app_context():
            cfg = cls.from_mapping(current_app.config, cfg)
        return cfg


def _as_bool(raw) -> bool:
    if isinstance(raw, bool):
        return raw
    return str(raw).strip().lower() not in {'0', 'false', 'no', ''}


def coerce_seed(value) -> int:
    """Convert a provided seed (int, str or None) into a bounded non-negative int.

    Digit strings are taken literally, other strings are hashed so the same
    text always yields the same seed, and None draws a random one.
    """
    if value is None:
        return random.randint(1, 1_000_000)
    if isinstance(value, bool):
        raise ConfigError("seed", "expected integer or string")
    if isinstance(value, int):
        return value % SEED_MAX_INT
    if isinstance(value, str):
        s = value.strip()
        if not s:
            return random.randint(1, 1_000_000)
        if s.isdigit():
            return int(s) % SEED_MAX_INT
        h = hashlib.sha256(s.encode('utf-8')).digest()
        return int.from_bytes(h[:8], 'big') % SEED_MAX_INT
    raise ConfigError("seed", "expected integer or string")


__all__ = ["GeneratorConfig", "coerce_seed", "SEED_MAX_INT"]
