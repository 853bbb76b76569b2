from __future__ import annotations
import sys
from dataclasses import dataclass, field, asdict, is_dataclass, fields
from typing import Dict, List, Optional, Any, get_args, get_origin, get_type_hints
from enum import Enum
import json

from .data.constants import DEFAULT_AVATAR_COLORS, HABITATS, ROUNDS_PER_GAME


def _is_enum(tp: Any) -> bool:
    return isinstance(tp, type) and issubclass(tp, Enum)


def _coerce_item(tp: Any, value: Any) -> Any:
    if is_dataclass(tp) and isinstance(value, dict):
        return _build_dataclass(tp, value)
    if _is_enum(tp) and not isinstance(value, tp):
        return tp(value)
    return value


def _build_dataclass(cls, data: Dict[str, Any]):
    """Recursively coerce nested dicts/lists into a dataclass instance."""
    if not is_dataclass(cls):
        return data
    type_hints = get_type_hints(cls, globalns=sys.modules[cls.__module__].__dict__)
    kwargs = {}
    for f in fields(cls):
        if f.name not in data:
            continue  # keep default
        v = data[f.name]
        ft = type_hints.get(f.name, f.type)
        origin = get_origin(ft)

        if v is None:
            # Nulls for container fields mean "use the default"; Optional
            # scalars keep the explicit None.
            if is_dataclass(ft) or origin in (list, dict):
                continue

        if is_dataclass(ft) and isinstance(v, dict):
            kwargs[f.name] = _build_dataclass(ft, v)
        elif _is_enum(ft) and v is not None:
            kwargs[f.name] = ft(v)
        elif origin is list and isinstance(v, (list, tuple)):
            (inner,) = get_args(ft) or (Any,)
            kwargs[f.name] = [_coerce_item(inner, x) for x in v]
        elif origin is dict and isinstance(v, dict):
            kt, vt = get_args(ft) or (Any, Any)
            kwargs[f.name] = {k: _coerce_item(vt, x) for k, x in v.items()}
        else:
            kwargs[f.name] = v
    return cls(**kwargs)


def _plain(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, dict):
        return {k: _plain(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_plain(v) for v in value]
    return value


class GoalScoringMode(str, Enum):
    COMPETITIVE = "competitive"
    CASUAL = "casual"


class Expansion(str, Enum):
    EUROPEAN = "european"
    OCEANIA = "oceania"


class _Record:
    """Dict/JSON round-tripping shared by every persisted record."""

    def to_dict(self) -> Dict[str, Any]:
        return _plain(asdict(self))

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), indent=2)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]):
        return _build_dataclass(cls, data)


@dataclass
class RoundGoalScore(_Record):
    round: int
    points: int = 0


def create_empty_round_goals() -> List[RoundGoalScore]:
    return [RoundGoalScore(round=i + 1, points=0) for i in range(ROUNDS_PER_GAME)]


def create_empty_nectar_scores() -> Dict[str, int]:
    return {habitat: 0 for habitat in HABITATS}


@dataclass
class ScoreInput(_Record):
    """Raw category figures for one player while a game is being scored."""

    player_id: str
    bird_card_points: int = 0
    bonus_card_points: int = 0
    round_goals: List[RoundGoalScore] = field(default_factory=create_empty_round_goals)
    eggs_count: int = 0
    cached_food_count: int = 0
    tucked_cards_count: int = 0
    unused_food_tokens: int = 0
    nectar_scores: Dict[str, int] = field(default_factory=create_empty_nectar_scores)


@dataclass(frozen=True)
class RegionContribution:
    player_id: str
    region: str
    amount: int


@dataclass(frozen=True)
class ScoreBreakdown(_Record):
    bird_card_points: int = 0
    bonus_card_points: int = 0
    round_goal_points: int = 0
    eggs_points: int = 0
    cached_food_points: int = 0
    tucked_cards_points: int = 0
    nectar_points: int = 0
    total: int = 0


@dataclass(frozen=True)
class RankedResult(_Record):
    player_id: str
    display_name: str
    total_score: int
    tiebreaker_value: int
    position: int
    is_winner: bool
    breakdown: ScoreBreakdown = field(default_factory=ScoreBreakdown)


@dataclass
class Player(_Record):
    id: str
    name: str
    avatar_color: str = DEFAULT_AVATAR_COLORS[0]
    avatar_id: Optional[str] = None
    created_at: int = 0
    is_active: bool = True


@dataclass
class Game(_Record):
    id: str
    played_at: int
    goal_scoring_mode: GoalScoringMode = GoalScoringMode.COMPETITIVE
    player_count: int = 0
    is_complete: bool = False
    notes: Optional[str] = None
    expansions: List[Expansion] = field(default_factory=list)


@dataclass
class GameScore(_Record):
    """Finalized, persisted score record for one player in one game."""

    id: str
    game_id: str
    player_id: str
    bird_card_points: int = 0
    bonus_card_points: int = 0
    round_goals: List[RoundGoalScore] = field(default_factory=create_empty_round_goals)
    eggs_count: int = 0
    cached_food_count: int = 0
    tucked_cards_count: int = 0
    nectar_scores: Dict[str, int] = field(default_factory=create_empty_nectar_scores)
    nectar_points: int = 0
    unused_food_tokens: int = 0
    total_score: int = 0
    finish_position: int = 0
    is_winner: bool = False


@dataclass
class GameWithScores(_Record):
    game: Game
    scores: List[GameScore] = field(default_factory=list)
    player_names: Dict[str, str] = field(default_factory=dict)

    @property
    def id(self) -> str:
        return self.game.id

    @property
    def played_at(self) -> int:
        return self.game.played_at

    def winners(self) -> List[GameScore]:
        return [s for s in self.scores if s.is_winner]

    def score_for(self, player_id: str) -> Optional[GameScore]:
        return next((s for s in self.scores if s.player_id == player_id), None)


__all__ = [
    "GoalScoringMode",
    "Expansion",
    "RoundGoalScore",
    "ScoreInput",
    "RegionContribution",
    "ScoreBreakdown",
    "RankedResult",
    "Player",
    "Game",
    "GameScore",
    "GameWithScores",
    "create_empty_round_goals",
    "create_empty_nectar_scores",
]
