"""Wingspan score keeper: compose scores, resolve nectar majorities, rank players."""

from importlib import import_module
from typing import Any

__version__ = "0.1.0"
__all__ = [
    "compose_score",
    "allocate_majority_bonus",
    "rank_players",
    "GoalScoringMode",
    "Expansion",
    "ScoreInput",
    "ScoreBreakdown",
    "RankedResult",
    "RegionContribution",
    "PlayerScore",
    "GameSession",
    "InMemoryStore",
    "ScoringRules",
    "__version__",
]

_EXPORTS = {
    "compose_score": ("scoring.composer", "compose_score"),
    "allocate_majority_bonus": ("scoring.majority", "allocate_majority_bonus"),
    "rank_players": ("scoring.ranking", "rank_players"),
    "PlayerScore": ("scoring.ranking", "PlayerScore"),
    "GoalScoringMode": ("game_models", "GoalScoringMode"),
    "Expansion": ("game_models", "Expansion"),
    "ScoreInput": ("game_models", "ScoreInput"),
    "ScoreBreakdown": ("game_models", "ScoreBreakdown"),
    "RankedResult": ("game_models", "RankedResult"),
    "RegionContribution": ("game_models", "RegionContribution"),
    "GameSession": ("session", "GameSession"),
    "InMemoryStore": ("storage", "InMemoryStore"),
    "ScoringRules": ("config", "ScoringRules"),
}


def __getattr__(name: str) -> Any:
    if name in _EXPORTS:
        module_name, attr_name = _EXPORTS[name]
        module = import_module(f".{module_name}", __name__)
        attr = getattr(module, attr_name)
        globals()[name] = attr
        return attr
    raise AttributeError(f"module '{__name__}' has no attribute '{name}'")


def __dir__() -> list[str]:
    return sorted(set(list(globals().keys()) + list(__all__)))
