"""Historical statistics computed from finalized game records."""
from __future__ import annotations

import math
from dataclasses import dataclass, field, asdict
from typing import Any, Dict, Iterable, List, Sequence, Tuple

from .game_models import GameScore, GameWithScores
from .scoring.composer import round_goal_total

RECENT_RESULTS = 5


@dataclass
class HeadToHead:
    player_id: str
    opponent_id: str
    wins: int = 0
    losses: int = 0
    ties: int = 0
    games_played: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class PlayerStats:
    player_id: str
    total_games: int = 0
    wins: int = 0
    losses: int = 0
    ties: int = 0
    win_rate: int = 0
    avg_finish_position: float = 0.0
    avg_score: float = 0.0
    high_score: int = 0
    low_score: int = 0
    category_averages: Dict[str, float] = field(default_factory=dict)
    current_win_streak: int = 0
    best_win_streak: int = 0
    last_results: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def _round1(value: float) -> float:
    # Half-up to one decimal place.
    return math.floor(value * 10 + 0.5) / 10


def calculate_win_streak(results: Iterable[Tuple[bool, int]]) -> Tuple[int, int]:
    """Return ``(current, best)`` win streaks from ``(is_winner, played_at)`` pairs.

    The current streak counts consecutive wins back from the most recent game.
    """
    ordered = sorted(results, key=lambda r: r[1], reverse=True)
    current = best = run = 0
    seen_loss = False
    for is_winner, _ in ordered:
        if is_winner:
            run += 1
            if not seen_loss:
                current = run
            best = max(best, run)
        else:
            seen_loss = True
            run = 0
    return current, best


_CATEGORY_FIELDS = (
    ("bird_card_points", lambda s: s.bird_card_points),
    ("bonus_card_points", lambda s: s.bonus_card_points),
    ("round_goal_points", lambda s: round_goal_total(s.round_goals)),
    ("eggs_points", lambda s: s.eggs_count),
    ("cached_food_points", lambda s: s.cached_food_count),
    ("tucked_cards_points", lambda s: s.tucked_cards_count),
    ("nectar_points", lambda s: s.nectar_points),
)


def calculate_category_averages(scores: Sequence[GameScore]) -> Dict[str, float]:
    if not scores:
        return {name: 0.0 for name, _ in _CATEGORY_FIELDS}
    count = len(scores)
    return {
        name: _round1(sum(getter(s) for s in scores) / count)
        for name, getter in _CATEGORY_FIELDS
    }


def calculate_head_to_head(
    player_id: str, opponent_id: str, games: Iterable[GameWithScores]
) -> HeadToHead:
    """Compare finish positions in every game both players took part in."""
    record = HeadToHead(player_id=player_id, opponent_id=opponent_id)
    for game in games:
        mine = game.score_for(player_id)
        theirs = game.score_for(opponent_id)
        if mine is None or theirs is None:
            continue
        record.games_played += 1
        if mine.finish_position < theirs.finish_position:
            record.wins += 1
        elif mine.finish_position > theirs.finish_position:
            record.losses += 1
        else:
            record.ties += 1
    return record


def _result_letter(game: GameWithScores, score: GameScore) -> str:
    if not score.is_winner:
        return "L"
    return "T" if len(game.winners()) > 1 else "W"


def calculate_player_stats(player_id: str, games: Iterable[GameWithScores]) -> PlayerStats:
    """Aggregate a player's record over the given games.

    ``wins`` counts every game the player won, shared victories included;
    ``ties`` is how many of those wins were shared.
    """
    played = [(g, g.score_for(player_id)) for g in games]
    played = [(g, s) for g, s in played if s is not None]
    if not played:
        return PlayerStats(player_id=player_id, category_averages=calculate_category_averages([]))

    played.sort(key=lambda gs: gs[0].played_at, reverse=True)
    scores = [s for _, s in played]
    letters = [_result_letter(g, s) for g, s in played]

    total_games = len(scores)
    wins = sum(1 for s in scores if s.is_winner)
    ties = letters.count("T")
    totals = [s.total_score for s in scores]
    positive = [t for t in totals if t > 0]
    current, best = calculate_win_streak((s.is_winner, g.played_at) for g, s in played)

    return PlayerStats(
        player_id=player_id,
        total_games=total_games,
        wins=wins,
        losses=total_games - wins,
        ties=ties,
        win_rate=int(math.floor(wins / total_games * 100 + 0.5)),
        avg_finish_position=_round1(sum(s.finish_position for s in scores) / total_games),
        avg_score=_round1(sum(totals) / total_games),
        high_score=max(totals, default=0),
        low_score=min(positive, default=0),
        category_averages=calculate_category_averages(scores),
        current_win_streak=current,
        best_win_streak=best,
        last_results=letters[:RECENT_RESULTS],
    )


def get_leaderboard(player_stats: Iterable[PlayerStats]) -> List[PlayerStats]:
    """Sort by wins, then win rate, then average score."""
    return sorted(player_stats, key=lambda s: (s.wins, s.win_rate, s.avg_score), reverse=True)


__all__ = [
    "HeadToHead",
    "PlayerStats",
    "calculate_win_streak",
    "calculate_category_averages",
    "calculate_head_to_head",
    "calculate_player_stats",
    "get_leaderboard",
]
