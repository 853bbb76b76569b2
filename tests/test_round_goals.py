from __future__ import annotations

from wingspan_score.config import ScoringRules
from wingspan_score.game_models import GoalScoringMode
from wingspan_score.scoring import (
    get_casual_goal_points,
    get_competitive_goal_points,
    get_round_goal_points,
    get_tied_goal_points,
    resolve_competitive_round,
)


def test_competitive_table_four_players() -> None:
    assert [get_competitive_goal_points(p, 4) for p in (1, 2, 3, 4)] == [4, 2, 1, 0]


def test_competitive_table_five_players() -> None:
    assert [get_competitive_goal_points(p, 5) for p in (1, 2, 3, 4, 5)] == [5, 2, 1, 0, 0]


def test_competitive_table_small_games() -> None:
    assert [get_competitive_goal_points(p, 2) for p in (1, 2)] == [4, 1]
    assert [get_competitive_goal_points(p, 3) for p in (1, 2, 3)] == [4, 1, 0]


def test_unknown_player_count_falls_back() -> None:
    assert get_competitive_goal_points(1, 1) == 4
    assert get_competitive_goal_points(2, 7) == 1
    assert get_competitive_goal_points(3, 7) == 0
    assert get_competitive_goal_points(6, 7) == 0


def test_placement_outside_table_scores_zero() -> None:
    assert get_competitive_goal_points(5, 4) == 0
    assert get_competitive_goal_points(0, 4) == 0


def test_tied_points_are_floored_average() -> None:
    # 4 players tied for 1st and 2nd share 4 + 2.
    assert get_tied_goal_points([1, 2], 4) == 3
    # 5 players, three-way tie for 2nd: (2 + 1 + 0) // 3.
    assert get_tied_goal_points([2, 3, 4], 5) == 1
    # 2 players tied: (4 + 1) // 2.
    assert get_tied_goal_points([1, 2], 2) == 2
    assert get_tied_goal_points([], 4) == 0


def test_casual_points_are_capped() -> None:
    assert get_casual_goal_points(7) == 5
    assert get_casual_goal_points(3) == 3
    assert get_casual_goal_points(0) == 0


def test_round_goal_points_by_mode() -> None:
    assert get_round_goal_points(GoalScoringMode.CASUAL, 1, 4, item_count=9) == 5
    assert get_round_goal_points("casual", 1, 4) == 0
    assert get_round_goal_points(GoalScoringMode.COMPETITIVE, 2, 4, item_count=9) == 2


def test_resolve_competitive_round_with_tie() -> None:
    points = resolve_competitive_round({"a": 6, "b": 4, "c": 4, "d": 1})

    assert points == {"a": 4, "b": 1, "c": 1, "d": 0}


def test_resolve_competitive_round_tie_for_first() -> None:
    points = resolve_competitive_round({"a": 3, "b": 3, "c": 2, "d": 0, "e": 0})

    # (5 + 2) // 2 for the leaders, 3rd place alone, last two split 0 + 0.
    assert points == {"a": 3, "b": 3, "c": 1, "d": 0, "e": 0}


def test_custom_rules_change_casual_cap() -> None:
    rules = ScoringRules(casual_goal_max=3)

    assert get_casual_goal_points(7, rules) == 3
