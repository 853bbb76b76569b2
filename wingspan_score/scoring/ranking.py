"""Finish positions, tiebreakers and shared victories."""
from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass, replace
from typing import Any, Dict, Iterable, List, Mapping, Optional, Union

from ..config import DEFAULT_RULES, ScoringRules
from ..errors import MissingScoreError
from ..game_models import Expansion, RankedResult, ScoreInput
from .composer import compose_score
from .majority import allocate_all

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PlayerScore:
    player_id: str
    display_name: str
    score: Optional[ScoreInput]


PlayerEntry = Union[PlayerScore, Mapping[str, Any]]


def _coerce_entry(entry: PlayerEntry) -> PlayerScore:
    if isinstance(entry, PlayerScore):
        return entry
    player_id = str(entry["player_id"])
    score = entry.get("score")
    if isinstance(score, Mapping):
        score = ScoreInput.from_dict({"player_id": player_id, **score})
    return PlayerScore(
        player_id=player_id,
        display_name=str(entry.get("display_name") or entry.get("player_name") or ""),
        score=score,
    )


def rank_players(
    players: Iterable[PlayerEntry],
    expansions: Iterable[Union[Expansion, str]] = (),
    rules: ScoringRules = DEFAULT_RULES,
) -> List[RankedResult]:
    """Rank a full player set.

    Players are ordered by total score, then by unused food tokens, both
    descending; the sort is stable so fully tied players keep their input
    order. Positions use competition ranking: a player shares the previous
    player's position only when both total and tiebreaker match, otherwise
    the position is the 1-based index. Every player at position 1 is a winner.

    Raises :class:`MissingScoreError` when an entry carries no score.
    """
    entries = []
    for raw in players:
        entry = _coerce_entry(raw)
        if entry.score is None:
            raise MissingScoreError(f"No score recorded for player '{entry.player_id}'")
        if entry.score.player_id != entry.player_id:
            entry = replace(entry, score=replace(entry.score, player_id=entry.player_id))
        entries.append(entry)

    oceania = Expansion.OCEANIA in {Expansion(x) for x in expansions}
    bonuses: Dict[str, int] = (
        allocate_all([e.score for e in entries], rules=rules) if oceania else {}
    )

    composed = []
    for entry in entries:
        breakdown = compose_score(entry.score, bonuses.get(entry.player_id, 0))
        composed.append((entry, breakdown))
    composed.sort(key=lambda item: (-item[1].total, -item[0].score.unused_food_tokens))

    ranked: List[RankedResult] = []
    position = 1
    for index, (entry, breakdown) in enumerate(composed):
        tiebreaker = entry.score.unused_food_tokens
        if index > 0:
            previous = ranked[-1]
            tied = (
                breakdown.total == previous.total_score
                and tiebreaker == previous.tiebreaker_value
            )
            if not tied:
                position = index + 1
        ranked.append(
            RankedResult(
                player_id=entry.player_id,
                display_name=entry.display_name,
                total_score=breakdown.total,
                tiebreaker_value=tiebreaker,
                position=position,
                is_winner=position == 1,
                breakdown=breakdown,
            )
        )
    logger.debug("Ranked %d players: %s", len(ranked), [(r.player_id, r.position) for r in ranked])
    return ranked


def has_shared_victory(results: Iterable[RankedResult]) -> bool:
    return len(get_winners(results)) > 1


def get_winners(results: Iterable[RankedResult]) -> List[RankedResult]:
    return [r for r in results if r.is_winner]


def get_position_counts(results: Iterable[RankedResult]) -> Dict[int, int]:
    return dict(Counter(r.position for r in results))


def format_position(position: int) -> str:
    """Ordinal label for a finish position: 1st, 2nd, 3rd, 11th, 22nd..."""
    if 10 <= position % 100 <= 20:
        suffix = "th"
    else:
        suffix = {1: "st", 2: "nd", 3: "rd"}.get(position % 10, "th")
    return f"{position}{suffix}"


__all__ = [
    "PlayerScore",
    "rank_players",
    "has_shared_victory",
    "get_winners",
    "get_position_counts",
    "format_position",
]
