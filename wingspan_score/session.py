"""Caller-owned state for a game that is being scored.

A :class:`GameSession` holds the players, goal mode, expansions and the
in-progress :class:`ScoreInput` for each player. Ranking is recomputed from
scratch on every request; nothing in the scoring core keeps state between calls.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from typing import Dict, Iterable, List, Mapping, Optional, Sequence

from .config import DEFAULT_RULES, ScoringRules
from .errors import SessionError
from .game_models import (
    Expansion,
    Game,
    GameScore,
    GameWithScores,
    GoalScoringMode,
    RankedResult,
    ScoreInput,
)
from .scoring import PlayerScore, compose_score, create_empty_score_input, rank_players
from .scoring.majority import allocate_all
from .storage import new_id, now_ms
from .updates import ScoreUpdate, SetNectar, SetRoundGoal, apply_update
from .validators import validate_player_count

logger = logging.getLogger(__name__)


@dataclass
class GameSession:
    game_id: str
    player_ids: List[str]
    player_names: Dict[str, str]
    mode: GoalScoringMode = GoalScoringMode.COMPETITIVE
    expansions: List[Expansion] = field(default_factory=list)
    scores: Dict[str, ScoreInput] = field(default_factory=dict)
    rules: ScoringRules = DEFAULT_RULES
    current_player_index: int = 0
    is_scoring: bool = True
    is_reviewing: bool = False
    is_complete: bool = False
    ranked_results: List[RankedResult] = field(default_factory=list)

    @classmethod
    def start_new_game(
        cls,
        player_ids: Sequence[str],
        player_names: Mapping[str, str],
        mode: GoalScoringMode = GoalScoringMode.COMPETITIVE,
        expansions: Iterable[Expansion] = (),
        rules: ScoringRules = DEFAULT_RULES,
    ) -> "GameSession":
        validate_player_count(len(player_ids)).raise_for_error()
        if len(set(player_ids)) != len(player_ids):
            raise SessionError("Duplicate player in game")
        session = cls(
            game_id=new_id(),
            player_ids=list(player_ids),
            player_names=dict(player_names),
            mode=GoalScoringMode(mode),
            expansions=[Expansion(e) for e in expansions],
            scores={pid: create_empty_score_input(pid) for pid in player_ids},
            rules=rules,
        )
        logger.debug("Started game %s with %d players", session.game_id, len(player_ids))
        return session

    # ------------------------------------------------------------------
    # Score entry
    # ------------------------------------------------------------------
    def _require_open(self) -> None:
        if self.is_complete:
            raise SessionError(f"Game '{self.game_id}' is already finalized")

    def _require_player(self, player_id: str) -> ScoreInput:
        score = self.scores.get(player_id)
        if player_id not in self.player_ids or score is None:
            raise SessionError(f"Player '{player_id}' is not part of this game")
        return score

    def apply(self, player_id: str, update: ScoreUpdate) -> ScoreInput:
        self._require_open()
        score = apply_update(self._require_player(player_id), update)
        self.scores[player_id] = score
        return score

    def set_round_goal(self, player_id: str, round_number: int, points: int) -> ScoreInput:
        return self.apply(player_id, SetRoundGoal(round=round_number, points=points))

    def set_nectar_score(self, player_id: str, habitat: str, amount: int) -> ScoreInput:
        return self.apply(player_id, SetNectar(habitat=habitat, amount=amount))

    def get_player_score(self, player_id: str) -> Optional[ScoreInput]:
        return self.scores.get(player_id)

    def has_expansion(self, expansion: Expansion) -> bool:
        return Expansion(expansion) in self.expansions

    def total_score(self, player_id: str) -> int:
        """Live total for one player, nectar majorities included under Oceania."""
        score = self.scores.get(player_id)
        if score is None:
            return 0
        bonus = 0
        if self.has_expansion(Expansion.OCEANIA):
            bonus = allocate_all(self._ranking_scores(), rules=self.rules).get(player_id, 0)
        return compose_score(score, bonus).total

    # ------------------------------------------------------------------
    # Navigation
    # ------------------------------------------------------------------
    @property
    def current_player_id(self) -> Optional[str]:
        if 0 <= self.current_player_index < len(self.player_ids):
            return self.player_ids[self.current_player_index]
        return None

    def get_current_player_score(self) -> Optional[ScoreInput]:
        pid = self.current_player_id
        return self.scores.get(pid) if pid is not None else None

    def next_player(self) -> None:
        if self.current_player_index < len(self.player_ids) - 1:
            self.current_player_index += 1

    def previous_player(self) -> None:
        if self.current_player_index > 0:
            self.current_player_index -= 1

    def go_to_player(self, index: int) -> None:
        if 0 <= index < len(self.player_ids):
            self.current_player_index = index

    # ------------------------------------------------------------------
    # Review and finalize
    # ------------------------------------------------------------------
    def _ranking_scores(self) -> List[ScoreInput]:
        # The session key wins over the id stored on the input.
        scores = []
        for pid in self.player_ids:
            score = self.scores.get(pid) or create_empty_score_input(pid)
            if score.player_id != pid:
                score = replace(score, player_id=pid)
            scores.append(score)
        return scores

    def calculate_results(self) -> List[RankedResult]:
        # A player with nothing entered yet ranks on an all-zero score.
        entries = [
            PlayerScore(player_id=pid, display_name=self.player_names.get(pid, "Unknown"), score=score)
            for pid, score in zip(self.player_ids, self._ranking_scores())
        ]
        return rank_players(entries, self.expansions, self.rules)

    def start_review(self) -> List[RankedResult]:
        self._require_open()
        self.ranked_results = self.calculate_results()
        self.is_scoring = False
        self.is_reviewing = True
        return self.ranked_results

    def back_to_scoring(self) -> None:
        self._require_open()
        self.is_scoring = True
        self.is_reviewing = False

    def build_records(self, played_at: Optional[int] = None) -> tuple[Game, List[GameScore]]:
        results = self.calculate_results()
        game = Game(
            id=self.game_id,
            played_at=played_at if played_at is not None else now_ms(),
            goal_scoring_mode=self.mode,
            player_count=len(self.player_ids),
            expansions=list(self.expansions),
        )
        records = []
        for ranked in results:
            score = self.scores.get(ranked.player_id) or create_empty_score_input(ranked.player_id)
            records.append(
                GameScore(
                    id=new_id(),
                    game_id=self.game_id,
                    player_id=ranked.player_id,
                    bird_card_points=score.bird_card_points,
                    bonus_card_points=score.bonus_card_points,
                    round_goals=list(score.round_goals),
                    eggs_count=score.eggs_count,
                    cached_food_count=score.cached_food_count,
                    tucked_cards_count=score.tucked_cards_count,
                    nectar_scores=dict(score.nectar_scores),
                    nectar_points=ranked.breakdown.nectar_points,
                    unused_food_tokens=score.unused_food_tokens,
                    total_score=ranked.total_score,
                    finish_position=ranked.position,
                    is_winner=ranked.is_winner,
                )
            )
        return game, records

    def finalize(self, store, played_at: Optional[int] = None) -> GameWithScores:
        """Persist the game through ``store.finalize_game``.

        The session stays open if the store raises, so entry can be retried.
        """
        self._require_open()
        game, records = self.build_records(played_at)
        saved = store.finalize_game(game, records)
        self.ranked_results = self.calculate_results()
        self.is_complete = True
        self.is_scoring = False
        self.is_reviewing = False
        logger.info("Finalized game %s", self.game_id)
        return saved

    def cancel(self) -> None:
        self._require_open()
        self.scores = {pid: create_empty_score_input(pid) for pid in self.player_ids}
        self.ranked_results = []
        self.current_player_index = 0
        self.is_scoring = False
        self.is_reviewing = False


__all__ = ["GameSession"]
