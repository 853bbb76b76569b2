from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Mapping, Tuple
import json
import logging
import os

import yaml

from .data.constants import (
    CASUAL_GOAL_MAX_POINTS,
    COMPETITIVE_FALLBACK_POINTS,
    COMPETITIVE_GOAL_POINTS,
    NECTAR_FIRST_PLACE_VP,
    NECTAR_SECOND_PLACE_VP,
)

logger = logging.getLogger(__name__)

ENV_PREFIX = "WINGSPAN__"


@dataclass(frozen=True)
class ScoringRules:
    """Tunable scoring constants; defaults follow the printed rules."""

    nectar_first: int = NECTAR_FIRST_PLACE_VP
    nectar_second: int = NECTAR_SECOND_PLACE_VP
    casual_goal_max: int = CASUAL_GOAL_MAX_POINTS
    competitive_table: Mapping[int, Tuple[int, ...]] = field(
        default_factory=lambda: dict(COMPETITIVE_GOAL_POINTS)
    )
    competitive_fallback: Tuple[int, ...] = COMPETITIVE_FALLBACK_POINTS


DEFAULT_RULES = ScoringRules()


def _deep_merge(a: Dict[str, Any], b: Dict[str, Any]) -> Dict[str, Any]:
    out = dict(a)
    for k, v in (b or {}).items():
        if isinstance(v, dict) and isinstance(out.get(k), dict):
            out[k] = _deep_merge(out[k], v)
        else:
            out[k] = v
    return out


def _load_one(path: str) -> Dict[str, Any]:
    with open(path, "r", encoding="utf-8") as f:
        text = f.read()
    if path.endswith(".json"):
        d = json.loads(text)
    else:
        # YAML is a superset of JSON, so anything else goes through the YAML loader
        d = yaml.safe_load(text)
    if not isinstance(d, dict):
        logger.warning("Ignoring config %s: top level is not a mapping", path)
        return {}
    return d


def load_configs(paths: Iterable[str] | None) -> Dict[str, Any]:
    cfg: Dict[str, Any] = {}
    for p in (paths or []):
        logger.debug("Loading config %s", p)
        cfg = _deep_merge(cfg, _load_one(p))
    return cfg


def env_overrides(prefix: str = ENV_PREFIX) -> Dict[str, Any]:
    # Nested via double underscores: WINGSPAN__SCORING__NECTAR_FIRST=6
    out: Dict[str, Any] = {}
    for k, v in os.environ.items():
        if not k.startswith(prefix):
            continue
        parts = k[len(prefix):].split("__")
        cur = out
        for i, part in enumerate(parts):
            key = part.lower()
            if i == len(parts) - 1:
                cur[key] = _coerce(v)
            else:
                cur = cur.setdefault(key, {})
    return out


def _coerce(s: str) -> Any:
    t = s.strip().lower()
    if t in ("true", "false"):
        return t == "true"
    try:
        if "." in t:
            return float(t)
        return int(t)
    except ValueError:
        return s


def apply_cli_overrides(base: Dict[str, Any], overrides: Dict[str, Any]) -> Dict[str, Any]:
    return _deep_merge(base, overrides or {})


def scoring_rules(cfg: Mapping[str, Any] | None) -> ScoringRules:
    """Build :class:`ScoringRules` from the ``scoring`` block of a merged config."""
    block = dict((cfg or {}).get("scoring") or {})
    if not block:
        return DEFAULT_RULES
    table = dict(COMPETITIVE_GOAL_POINTS)
    for count, points in (block.get("competitive_table") or {}).items():
        table[int(count)] = tuple(int(p) for p in points)
    fallback = block.get("competitive_fallback")
    return ScoringRules(
        nectar_first=int(block.get("nectar_first", NECTAR_FIRST_PLACE_VP)),
        nectar_second=int(block.get("nectar_second", NECTAR_SECOND_PLACE_VP)),
        casual_goal_max=int(block.get("casual_goal_max", CASUAL_GOAL_MAX_POINTS)),
        competitive_table=table,
        competitive_fallback=(
            tuple(int(p) for p in fallback) if fallback else COMPETITIVE_FALLBACK_POINTS
        ),
    )


def load_rules(paths: Iterable[str] | None = None, prefix: str = ENV_PREFIX) -> ScoringRules:
    cfg = apply_cli_overrides(load_configs(paths), env_overrides(prefix))
    return scoring_rules(cfg)


__all__ = [
    "ScoringRules",
    "DEFAULT_RULES",
    "load_configs",
    "env_overrides",
    "apply_cli_overrides",
    "scoring_rules",
    "load_rules",
    "_deep_merge",
]
