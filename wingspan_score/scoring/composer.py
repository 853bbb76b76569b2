"""Per-player score composition."""
from __future__ import annotations

from typing import Iterable

from ..game_models import (
    RoundGoalScore,
    ScoreBreakdown,
    ScoreInput,
    create_empty_nectar_scores,
    create_empty_round_goals,
)


def round_goal_total(round_goals: Iterable[RoundGoalScore]) -> int:
    return sum(int(rg.points) for rg in round_goals)


def compose_score(score: ScoreInput, majority_bonus: int = 0) -> ScoreBreakdown:
    """Return the category breakdown and grand total for one player.

    ``majority_bonus`` is the nectar majority award already resolved across all
    players (0 when Oceania is not in play). Inputs are expected to be
    non-negative integers; no clamping happens here.
    """
    round_goal_points = round_goal_total(score.round_goals)
    total = (
        score.bird_card_points
        + score.bonus_card_points
        + round_goal_points
        + score.eggs_count
        + score.cached_food_count
        + score.tucked_cards_count
        + majority_bonus
    )
    return ScoreBreakdown(
        bird_card_points=score.bird_card_points,
        bonus_card_points=score.bonus_card_points,
        round_goal_points=round_goal_points,
        eggs_points=score.eggs_count,
        cached_food_points=score.cached_food_count,
        tucked_cards_points=score.tucked_cards_count,
        nectar_points=majority_bonus,
        total=total,
    )


def calculate_total_score(score: ScoreInput, majority_bonus: int = 0) -> int:
    return compose_score(score, majority_bonus).total


def create_empty_score_input(player_id: str) -> ScoreInput:
    return ScoreInput(
        player_id=player_id,
        round_goals=create_empty_round_goals(),
        nectar_scores=create_empty_nectar_scores(),
    )


__all__ = [
    "compose_score",
    "calculate_total_score",
    "round_goal_total",
    "create_empty_score_input",
]
