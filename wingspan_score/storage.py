"""Record store for players, games and finalized scores.

The scoring core never talks to storage directly; sessions hand finalized
records to a store and the statistics layer reads them back. This module ships
an in-memory store, which is what the CLI and the HTTP app use.
"""
from __future__ import annotations

import logging
import threading
import time
import uuid
from typing import Dict, Iterable, List, Optional, Sequence

from .data.constants import DEFAULT_AVATAR_COLORS
from .errors import DuplicateRecordError, RecordNotFoundError
from .game_models import Expansion, Game, GameScore, GameWithScores, GoalScoringMode, Player
from .stats import (
    HeadToHead,
    PlayerStats,
    calculate_head_to_head,
    calculate_player_stats,
    get_leaderboard,
)
from .validators import validate_player_count, validate_player_name

logger = logging.getLogger(__name__)


def now_ms() -> int:
    return int(time.time() * 1000)


def new_id() -> str:
    return str(uuid.uuid4())


class InMemoryStore:
    def __init__(self) -> None:
        self._players: Dict[str, Player] = {}
        self._games: Dict[str, Game] = {}
        self._scores: Dict[str, List[GameScore]] = {}
        self._lock = threading.Lock()

    # ------------------------------------------------------------------
    # Players
    # ------------------------------------------------------------------
    def create_player(
        self,
        name: str,
        avatar_color: Optional[str] = None,
        avatar_id: Optional[str] = None,
        player_id: Optional[str] = None,
    ) -> Player:
        validate_player_name(name).raise_for_error()
        player = Player(
            id=player_id or new_id(),
            name=name.strip(),
            avatar_color=avatar_color or DEFAULT_AVATAR_COLORS[len(self._players) % len(DEFAULT_AVATAR_COLORS)],
            avatar_id=avatar_id,
            created_at=now_ms(),
        )
        with self._lock:
            self._players[player.id] = player
        return player

    def get_player(self, player_id: str) -> Optional[Player]:
        return self._players.get(player_id)

    def require_player(self, player_id: str) -> Player:
        player = self._players.get(player_id)
        if player is None:
            raise RecordNotFoundError(f"Unknown player '{player_id}'")
        return player

    def all_players(self, include_inactive: bool = False) -> List[Player]:
        players = [p for p in self._players.values() if include_inactive or p.is_active]
        return sorted(players, key=lambda p: p.name.lower())

    def update_player(
        self,
        player_id: str,
        name: Optional[str] = None,
        avatar_color: Optional[str] = None,
        avatar_id: Optional[str] = None,
    ) -> Player:
        player = self.require_player(player_id)
        if name is not None:
            validate_player_name(name).raise_for_error()
            player.name = name.strip()
        if avatar_color is not None:
            player.avatar_color = avatar_color
        if avatar_id is not None:
            player.avatar_id = avatar_id
        return player

    def soft_delete_player(self, player_id: str) -> None:
        self.require_player(player_id).is_active = False

    def restore_player(self, player_id: str) -> None:
        self.require_player(player_id).is_active = True

    def name_exists(self, name: str, exclude_id: Optional[str] = None) -> bool:
        wanted = name.strip().lower()
        return any(
            p.name.lower() == wanted and p.id != exclude_id
            for p in self._players.values()
            if p.is_active
        )

    def player_names(self, player_ids: Iterable[str]) -> Dict[str, str]:
        out: Dict[str, str] = {}
        for pid in player_ids:
            player = self._players.get(pid)
            if player is not None:
                out[pid] = player.name
        return out

    # ------------------------------------------------------------------
    # Games
    # ------------------------------------------------------------------
    def create_game(
        self,
        mode: GoalScoringMode,
        player_count: int,
        expansions: Sequence[Expansion] = (),
        played_at: Optional[int] = None,
        game_id: Optional[str] = None,
        notes: Optional[str] = None,
    ) -> Game:
        validate_player_count(player_count).raise_for_error()
        game = Game(
            id=game_id or new_id(),
            played_at=played_at if played_at is not None else now_ms(),
            goal_scoring_mode=GoalScoringMode(mode),
            player_count=player_count,
            notes=notes,
            expansions=[Expansion(e) for e in expansions],
        )
        with self._lock:
            self._games[game.id] = game
            self._scores.setdefault(game.id, [])
        return game

    def save_score(self, score: GameScore) -> None:
        with self._lock:
            self._save_score_locked(score)

    def _save_score_locked(self, score: GameScore) -> None:
        if score.game_id not in self._games:
            raise RecordNotFoundError(f"Unknown game '{score.game_id}'")
        rows = self._scores.setdefault(score.game_id, [])
        # One row per (game, player).
        rows[:] = [r for r in rows if r.player_id != score.player_id]
        rows.append(score)

    def mark_complete(self, game_id: str) -> None:
        self.require_game(game_id).is_complete = True

    def finalize_game(self, game: Game, scores: Sequence[GameScore]) -> GameWithScores:
        """Store a game and all its scores in one step, then mark it complete."""
        with self._lock:
            if game.id in self._games:
                raise DuplicateRecordError(f"Game '{game.id}' already exists")
            self._games[game.id] = game
            self._scores[game.id] = []
            try:
                for score in scores:
                    self._save_score_locked(score)
            except Exception:
                self._games.pop(game.id, None)
                self._scores.pop(game.id, None)
                raise
            game.is_complete = True
        logger.info("Stored game %s with %d scores", game.id, len(scores))
        return self.get_with_scores(game.id)

    def delete_game(self, game_id: str) -> None:
        with self._lock:
            self._games.pop(game_id, None)
            self._scores.pop(game_id, None)

    def get_game(self, game_id: str) -> Optional[Game]:
        return self._games.get(game_id)

    def require_game(self, game_id: str) -> Game:
        game = self._games.get(game_id)
        if game is None:
            raise RecordNotFoundError(f"Unknown game '{game_id}'")
        return game

    def scores_for_game(self, game_id: str) -> List[GameScore]:
        return sorted(self._scores.get(game_id, []), key=lambda s: s.finish_position)

    def get_with_scores(self, game_id: str) -> Optional[GameWithScores]:
        game = self._games.get(game_id)
        if game is None:
            return None
        scores = self.scores_for_game(game_id)
        return GameWithScores(
            game=game,
            scores=scores,
            player_names=self.player_names(s.player_id for s in scores),
        )

    def all_games(self, limit: Optional[int] = None, complete_only: bool = True) -> List[GameWithScores]:
        games = [g for g in self._games.values() if g.is_complete or not complete_only]
        games.sort(key=lambda g: g.played_at, reverse=True)
        if limit is not None:
            games = games[:limit]
        return [self.get_with_scores(g.id) for g in games]

    def games_for_player(self, player_id: str, limit: Optional[int] = None) -> List[GameWithScores]:
        games = [g for g in self.all_games() if g.score_for(player_id) is not None]
        return games[:limit] if limit is not None else games

    def recent(self, limit: int = 5) -> List[GameWithScores]:
        return self.all_games(limit=limit)

    def game_count(self) -> int:
        return sum(1 for g in self._games.values() if g.is_complete)

    # ------------------------------------------------------------------
    # Statistics
    # ------------------------------------------------------------------
    def player_stats(self, player_id: str) -> PlayerStats:
        return calculate_player_stats(player_id, self.games_for_player(player_id))

    def head_to_head(self, player_id: str, opponent_id: str) -> HeadToHead:
        return calculate_head_to_head(player_id, opponent_id, self.all_games())

    def all_head_to_head(self, player_id: str) -> List[HeadToHead]:
        games = self.games_for_player(player_id)
        opponents = sorted({s.player_id for g in games for s in g.scores if s.player_id != player_id})
        records = [calculate_head_to_head(player_id, opp, games) for opp in opponents]
        return sorted(records, key=lambda r: r.games_played, reverse=True)

    def leaderboard(self) -> List[PlayerStats]:
        stats = [self.player_stats(p.id) for p in self.all_players()]
        return get_leaderboard([s for s in stats if s.total_games > 0])

    def high_score(self) -> Optional[GameScore]:
        scores = [s for g in self.all_games() for s in g.scores]
        return max(scores, key=lambda s: s.total_score, default=None)

    def average_score(self) -> float:
        totals = [s.total_score for g in self.all_games() for s in g.scores]
        if not totals:
            return 0.0
        return round(sum(totals) / len(totals), 1)


__all__ = ["InMemoryStore", "now_ms", "new_id"]
