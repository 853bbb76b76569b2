"""Typed per-category edits applied to a :class:`ScoreInput` during entry."""
from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Callable, Dict, Mapping, Type, Union

from .data.constants import HABITATS, ROUND_GOAL_MAX_POINTS, ROUNDS_PER_GAME
from .errors import ValidationError
from .game_models import RoundGoalScore, ScoreInput
from .validators import clamp_non_negative


@dataclass(frozen=True)
class SetBirdCardPoints:
    value: int


@dataclass(frozen=True)
class SetBonusCardPoints:
    value: int


@dataclass(frozen=True)
class SetEggs:
    value: int


@dataclass(frozen=True)
class SetCachedFood:
    value: int


@dataclass(frozen=True)
class SetTuckedCards:
    value: int


@dataclass(frozen=True)
class SetUnusedFoodTokens:
    value: int


@dataclass(frozen=True)
class SetRoundGoal:
    round: int
    points: int


@dataclass(frozen=True)
class SetNectar:
    habitat: str
    amount: int


ScoreUpdate = Union[
    SetBirdCardPoints,
    SetBonusCardPoints,
    SetEggs,
    SetCachedFood,
    SetTuckedCards,
    SetUnusedFoodTokens,
    SetRoundGoal,
    SetNectar,
]


def _set_round_goal(score: ScoreInput, update: SetRoundGoal) -> ScoreInput:
    if not 1 <= update.round <= ROUNDS_PER_GAME:
        raise ValidationError(f"Round must be between 1 and {ROUNDS_PER_GAME}, got {update.round}")
    points = clamp_non_negative(update.points)
    if points > ROUND_GOAL_MAX_POINTS:
        raise ValidationError(f"Round goal points cannot exceed {ROUND_GOAL_MAX_POINTS}, got {points}")
    goals = [
        RoundGoalScore(round=rg.round, points=points if rg.round == update.round else rg.points)
        for rg in score.round_goals
    ]
    return replace(score, round_goals=goals)


def _set_nectar(score: ScoreInput, update: SetNectar) -> ScoreInput:
    if update.habitat not in HABITATS:
        raise ValidationError(f"Unknown habitat '{update.habitat}'")
    nectar = dict(score.nectar_scores)
    nectar[update.habitat] = clamp_non_negative(update.amount)
    return replace(score, nectar_scores=nectar)


def _field_setter(field_name: str) -> Callable[[ScoreInput, Any], ScoreInput]:
    def _apply(score: ScoreInput, update: Any) -> ScoreInput:
        return replace(score, **{field_name: clamp_non_negative(update.value)})

    return _apply


_HANDLERS: Dict[Type[Any], Callable[[ScoreInput, Any], ScoreInput]] = {
    SetBirdCardPoints: _field_setter("bird_card_points"),
    SetBonusCardPoints: _field_setter("bonus_card_points"),
    SetEggs: _field_setter("eggs_count"),
    SetCachedFood: _field_setter("cached_food_count"),
    SetTuckedCards: _field_setter("tucked_cards_count"),
    SetUnusedFoodTokens: _field_setter("unused_food_tokens"),
    SetRoundGoal: _set_round_goal,
    SetNectar: _set_nectar,
}


def apply_update(score: ScoreInput, update: ScoreUpdate) -> ScoreInput:
    """Return a copy of ``score`` with ``update`` applied; negatives clamp to 0."""
    handler = _HANDLERS.get(type(update))
    if handler is None:
        raise TypeError(f"Unsupported score update: {update!r}")
    return handler(score, update)


_SIMPLE_UPDATES: Dict[str, Type[Any]] = {
    "bird_cards": SetBirdCardPoints,
    "bonus_cards": SetBonusCardPoints,
    "eggs": SetEggs,
    "cached_food": SetCachedFood,
    "tucked_cards": SetTuckedCards,
    "unused_food_tokens": SetUnusedFoodTokens,
}


def update_from_dict(payload: Mapping[str, Any]) -> ScoreUpdate:
    """Parse a wire payload such as ``{"category": "eggs", "value": 4}``."""
    category = payload.get("category")
    if category in _SIMPLE_UPDATES:
        return _SIMPLE_UPDATES[category](value=int(payload.get("value", 0)))
    if category == "round_goals":
        return SetRoundGoal(round=int(payload["round"]), points=int(payload.get("points", 0)))
    if category == "nectar":
        return SetNectar(habitat=str(payload["habitat"]), amount=int(payload.get("amount", 0)))
    raise ValidationError(f"Unknown score category '{category}'")


__all__ = [
    "SetBirdCardPoints",
    "SetBonusCardPoints",
    "SetEggs",
    "SetCachedFood",
    "SetTuckedCards",
    "SetUnusedFoodTokens",
    "SetRoundGoal",
    "SetNectar",
    "ScoreUpdate",
    "apply_update",
    "update_from_dict",
]
