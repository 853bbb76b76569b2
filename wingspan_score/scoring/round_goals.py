"""End-of-round goal point mapping for the two goal board sides."""
from __future__ import annotations

from itertools import groupby
from typing import Dict, Mapping, Optional, Sequence, Tuple

from ..config import DEFAULT_RULES, ScoringRules
from ..game_models import GoalScoringMode


def _points_table(player_count: int, rules: ScoringRules) -> Tuple[int, ...]:
    table = rules.competitive_table.get(player_count)
    if table is None:
        return tuple(rules.competitive_fallback)
    return tuple(table)


def get_competitive_goal_points(
    placement: int, player_count: int, rules: ScoringRules = DEFAULT_RULES
) -> int:
    """Points for ``placement`` (1-based) on the competitive side.

    Unknown player counts use the fallback 4/1/0 scheme. Placements past the
    end of the table score nothing.
    """
    table = _points_table(player_count, rules)
    if placement < 1 or placement > len(table):
        return 0
    return table[placement - 1]


def get_tied_goal_points(
    placements: Sequence[int], player_count: int, rules: ScoringRules = DEFAULT_RULES
) -> int:
    """Points each tied player receives: summed placements, floored average."""
    if not placements:
        return 0
    total = sum(get_competitive_goal_points(p, player_count, rules) for p in placements)
    return total // len(placements)


def get_casual_goal_points(item_count: int, rules: ScoringRules = DEFAULT_RULES) -> int:
    return min(item_count, rules.casual_goal_max)


def get_round_goal_points(
    mode: GoalScoringMode,
    placement: int,
    player_count: int,
    item_count: Optional[int] = None,
    rules: ScoringRules = DEFAULT_RULES,
) -> int:
    if GoalScoringMode(mode) is GoalScoringMode.CASUAL:
        return get_casual_goal_points(item_count or 0, rules)
    return get_competitive_goal_points(placement, player_count, rules)


def resolve_competitive_round(
    counts: Mapping[str, int],
    player_count: Optional[int] = None,
    rules: ScoringRules = DEFAULT_RULES,
) -> Dict[str, int]:
    """Resolve one competitive round from each player's achievement count.

    Players are placed by count, highest first. Players with equal counts
    occupy consecutive placements and split them with
    :func:`get_tied_goal_points`.
    """
    if player_count is None:
        player_count = len(counts)
    ordered = sorted(counts.items(), key=lambda item: item[1], reverse=True)
    out: Dict[str, int] = {}
    next_placement = 1
    for _, group in groupby(ordered, key=lambda item: item[1]):
        members = [pid for pid, _ in group]
        placements = list(range(next_placement, next_placement + len(members)))
        if len(members) == 1:
            points = get_competitive_goal_points(placements[0], player_count, rules)
        else:
            points = get_tied_goal_points(placements, player_count, rules)
        for pid in members:
            out[pid] = points
        next_placement += len(members)
    return out


__all__ = [
    "get_competitive_goal_points",
    "get_tied_goal_points",
    "get_casual_goal_points",
    "get_round_goal_points",
    "resolve_competitive_round",
]
