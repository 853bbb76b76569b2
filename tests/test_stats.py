from __future__ import annotations

from wingspan_score.game_models import Game, GameScore, GameWithScores, RoundGoalScore
from wingspan_score.stats import (
    PlayerStats,
    calculate_category_averages,
    calculate_head_to_head,
    calculate_player_stats,
    calculate_win_streak,
    get_leaderboard,
)


def _game(game_id: str, played_at: int, rows) -> GameWithScores:
    scores = [
        GameScore(
            id=f"{game_id}-{pid}",
            game_id=game_id,
            player_id=pid,
            bird_card_points=total,
            total_score=total,
            finish_position=pos,
            is_winner=pos == 1,
        )
        for pid, total, pos in rows
    ]
    return GameWithScores(game=Game(id=game_id, played_at=played_at, player_count=len(rows)), scores=scores)


GAMES = [
    _game("g1", 100, [("a", 80, 1), ("b", 70, 2)]),
    _game("g2", 200, [("a", 60, 2), ("b", 75, 1), ("c", 50, 3)]),
    _game("g3", 300, [("a", 90, 1), ("b", 90, 1)]),
    _game("g4", 400, [("a", 88, 1), ("c", 40, 2)]),
]


def test_win_streak_counts_from_most_recent() -> None:
    results = [(True, 1), (True, 2), (False, 3), (True, 4), (True, 5), (True, 6)]

    assert calculate_win_streak(results) == (3, 3)
    assert calculate_win_streak([(False, 2), (True, 1)]) == (0, 1)
    assert calculate_win_streak([]) == (0, 0)


def test_category_averages_round_to_one_decimal() -> None:
    scores = [
        GameScore(id="1", game_id="g", player_id="a", bird_card_points=10, eggs_count=3,
                  round_goals=[RoundGoalScore(1, 4), RoundGoalScore(2, 1), RoundGoalScore(3, 0), RoundGoalScore(4, 0)]),
        GameScore(id="2", game_id="g", player_id="a", bird_card_points=15, eggs_count=4, nectar_points=5),
        GameScore(id="3", game_id="g", player_id="a", bird_card_points=15, eggs_count=4),
    ]

    averages = calculate_category_averages(scores)

    assert averages["bird_card_points"] == 13.3
    assert averages["eggs_points"] == 3.7
    assert averages["round_goal_points"] == 1.7
    assert averages["nectar_points"] == 1.7
    assert calculate_category_averages([])["bird_card_points"] == 0.0


def test_head_to_head() -> None:
    record = calculate_head_to_head("a", "b", GAMES)

    assert (record.wins, record.losses, record.ties, record.games_played) == (1, 1, 1, 3)


def test_player_stats_counts_shared_victories() -> None:
    stats = calculate_player_stats("a", GAMES)

    assert stats.total_games == 4
    assert stats.wins == 3
    assert stats.ties == 1
    assert stats.losses == 1
    assert stats.win_rate == 75
    assert stats.avg_finish_position == 1.3
    assert stats.avg_score == 79.5
    assert stats.high_score == 90
    assert stats.low_score == 60
    assert stats.current_win_streak == 2
    assert stats.best_win_streak == 2
    assert stats.last_results == ["W", "T", "L", "W"]


def test_player_without_games() -> None:
    stats = calculate_player_stats("zed", GAMES)

    assert stats.total_games == 0
    assert stats.last_results == []
    assert stats.category_averages["eggs_points"] == 0.0


def test_leaderboard_ordering() -> None:
    rows = [
        PlayerStats(player_id="x", wins=2, win_rate=50, avg_score=70.0),
        PlayerStats(player_id="y", wins=3, win_rate=30, avg_score=60.0),
        PlayerStats(player_id="z", wins=2, win_rate=50, avg_score=75.0),
    ]

    assert [s.player_id for s in get_leaderboard(rows)] == ["y", "z", "x"]
