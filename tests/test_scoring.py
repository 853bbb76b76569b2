from __future__ import annotations

from wingspan_score.game_models import RoundGoalScore, ScoreInput
from wingspan_score.scoring import (
    PlayerScore,
    calculate_total_score,
    compose_score,
    create_empty_score_input,
    rank_players,
    round_goal_total,
)


def _score(player_id: str, **kwargs) -> ScoreInput:
    goals = kwargs.pop("round_goals", [0, 0, 0, 0])
    return ScoreInput(
        player_id=player_id,
        round_goals=[RoundGoalScore(round=i + 1, points=p) for i, p in enumerate(goals)],
        **kwargs,
    )


def test_compose_sums_every_category() -> None:
    score = _score(
        "p1",
        bird_card_points=40,
        bonus_card_points=10,
        round_goals=[3, 2, 1, 0],
        eggs_count=5,
        cached_food_count=2,
        tucked_cards_count=1,
    )

    breakdown = compose_score(score, 0)

    assert breakdown.bird_card_points == 40
    assert breakdown.bonus_card_points == 10
    assert breakdown.round_goal_points == 6
    assert breakdown.eggs_points == 5
    assert breakdown.cached_food_points == 2
    assert breakdown.tucked_cards_points == 1
    assert breakdown.nectar_points == 0
    assert breakdown.total == 64


def test_compose_adds_majority_bonus() -> None:
    score = _score("p1", bird_card_points=12, eggs_count=3)

    breakdown = compose_score(score, 7)

    assert breakdown.nectar_points == 7
    assert breakdown.total == 12 + 3 + 7


def test_compose_total_is_additive_over_varied_inputs() -> None:
    cases = [
        dict(bird_card_points=0),
        dict(bird_card_points=55, bonus_card_points=9, round_goals=[5, 4, 0, 2], eggs_count=11),
        dict(cached_food_count=6, tucked_cards_count=14, unused_food_tokens=8),
    ]
    for bonus in (0, 2, 5):
        for kwargs in cases:
            score = _score("p", **kwargs)
            expected = (
                score.bird_card_points
                + score.bonus_card_points
                + sum(rg.points for rg in score.round_goals)
                + score.eggs_count
                + score.cached_food_count
                + score.tucked_cards_count
                + bonus
            )
            assert compose_score(score, bonus).total == expected


def test_unused_food_is_not_scored() -> None:
    score = _score("p1", bird_card_points=10, unused_food_tokens=9)

    assert calculate_total_score(score) == 10


def test_empty_score_input_has_four_rounds_and_three_habitats() -> None:
    score = create_empty_score_input("p9")

    assert [rg.round for rg in score.round_goals] == [1, 2, 3, 4]
    assert round_goal_total(score.round_goals) == 0
    assert score.nectar_scores == {"forest": 0, "grassland": 0, "wetland": 0}
    assert compose_score(score).total == 0


def test_end_to_end_three_player_base_game() -> None:
    alice = _score(
        "alice",
        bird_card_points=40,
        bonus_card_points=10,
        round_goals=[3, 2, 1, 0],
        eggs_count=5,
        cached_food_count=2,
        tucked_cards_count=1,
        unused_food_tokens=3,
    )
    bob = _score("bob", bird_card_points=50, bonus_card_points=14, unused_food_tokens=3)
    cara = _score("cara", bird_card_points=50, unused_food_tokens=5)

    results = rank_players(
        [
            PlayerScore("alice", "Alice", alice),
            PlayerScore("bob", "Bob", bob),
            PlayerScore("cara", "Cara", cara),
        ]
    )

    by_id = {r.player_id: r for r in results}
    assert by_id["alice"].total_score == 64
    assert by_id["bob"].total_score == 64
    assert by_id["cara"].total_score == 50
    assert [r.position for r in results] == [1, 1, 3]
    assert by_id["alice"].is_winner and by_id["bob"].is_winner
    assert not by_id["cara"].is_winner
    assert results[-1].player_id == "cara"
