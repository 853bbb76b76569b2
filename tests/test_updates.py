from __future__ import annotations

import pytest

from wingspan_score.errors import ValidationError
from wingspan_score.scoring import create_empty_score_input
from wingspan_score.updates import (
    SetBirdCardPoints,
    SetCachedFood,
    SetEggs,
    SetNectar,
    SetRoundGoal,
    SetUnusedFoodTokens,
    apply_update,
    update_from_dict,
)


def test_apply_update_returns_new_score() -> None:
    score = create_empty_score_input("p1")

    updated = apply_update(score, SetBirdCardPoints(37))

    assert updated.bird_card_points == 37
    assert score.bird_card_points == 0


def test_negative_values_clamp_to_zero() -> None:
    score = apply_update(create_empty_score_input("p1"), SetEggs(-4))

    assert score.eggs_count == 0


def test_round_goal_update_touches_one_round() -> None:
    score = apply_update(create_empty_score_input("p1"), SetRoundGoal(round=3, points=4))

    assert [rg.points for rg in score.round_goals] == [0, 0, 4, 0]


def test_round_goal_outside_game_is_rejected() -> None:
    with pytest.raises(ValidationError):
        apply_update(create_empty_score_input("p1"), SetRoundGoal(round=5, points=1))


def test_round_goal_points_above_cap_are_rejected() -> None:
    with pytest.raises(ValidationError):
        apply_update(create_empty_score_input("p1"), SetRoundGoal(round=2, points=6))


def test_nectar_update() -> None:
    score = apply_update(create_empty_score_input("p1"), SetNectar("wetland", 3))

    assert score.nectar_scores == {"forest": 0, "grassland": 0, "wetland": 3}


def test_unknown_habitat_is_rejected() -> None:
    with pytest.raises(ValidationError):
        apply_update(create_empty_score_input("p1"), SetNectar("desert", 3))


def test_unsupported_update_type() -> None:
    with pytest.raises(TypeError):
        apply_update(create_empty_score_input("p1"), object())


def test_update_from_dict() -> None:
    assert update_from_dict({"category": "cached_food", "value": 2}) == SetCachedFood(2)
    assert update_from_dict({"category": "unused_food_tokens", "value": "5"}) == SetUnusedFoodTokens(5)
    assert update_from_dict({"category": "round_goals", "round": 2, "points": 3}) == SetRoundGoal(2, 3)
    assert update_from_dict({"category": "nectar", "habitat": "forest", "amount": 1}) == SetNectar("forest", 1)
    with pytest.raises(ValidationError):
        update_from_dict({"category": "bird_count", "value": 1})
