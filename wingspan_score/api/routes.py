"""API routes for the score keeper."""

import logging
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from wingspan_score.data.constants import ROUND_GOAL_MAX_POINTS
from wingspan_score.errors import (
    DuplicateRecordError,
    MissingScoreError,
    RecordNotFoundError,
    ScoringError,
)
from wingspan_score.game_models import (
    Expansion,
    GoalScoringMode,
    RegionContribution,
    RoundGoalScore,
    ScoreInput,
    create_empty_nectar_scores,
    create_empty_round_goals,
)
from wingspan_score.scoring import (
    PlayerScore,
    allocate_majority_bonus,
    compose_score,
    has_shared_victory,
    rank_players,
    resolve_competitive_round,
)
from wingspan_score.session import GameSession
from wingspan_score.storage import InMemoryStore

logger = logging.getLogger(__name__)

router = APIRouter()

_STORE = InMemoryStore()


def get_store() -> InMemoryStore:
    return _STORE


# Request/Response models
class RoundGoalModel(BaseModel):
    round: int = Field(ge=1, le=4)
    points: int = Field(0, ge=0, le=ROUND_GOAL_MAX_POINTS)


class ScoreInputModel(BaseModel):
    player_id: str = ""
    bird_card_points: int = Field(0, ge=0)
    bonus_card_points: int = Field(0, ge=0)
    round_goals: List[RoundGoalModel] = Field(default_factory=list, max_length=4)
    eggs_count: int = Field(0, ge=0)
    cached_food_count: int = Field(0, ge=0)
    tucked_cards_count: int = Field(0, ge=0)
    unused_food_tokens: int = Field(0, ge=0)
    nectar_scores: Dict[str, int] = Field(default_factory=dict)

    def to_score_input(self, player_id: Optional[str] = None) -> ScoreInput:
        goals = create_empty_round_goals()
        for rg in self.round_goals:
            goals[rg.round - 1] = RoundGoalScore(round=rg.round, points=rg.points)
        nectar = create_empty_nectar_scores()
        nectar.update({k: max(0, v) for k, v in self.nectar_scores.items()})
        return ScoreInput(
            player_id=self.player_id if player_id is None else player_id,
            bird_card_points=self.bird_card_points,
            bonus_card_points=self.bonus_card_points,
            round_goals=goals,
            eggs_count=self.eggs_count,
            cached_food_count=self.cached_food_count,
            tucked_cards_count=self.tucked_cards_count,
            unused_food_tokens=self.unused_food_tokens,
            nectar_scores=nectar,
        )


class ComposeRequest(BaseModel):
    score: ScoreInputModel
    majority_bonus: int = Field(0, ge=0)


class PlayerEntryModel(BaseModel):
    player_id: str
    display_name: str = ""
    score: Optional[ScoreInputModel] = None


class RankRequest(BaseModel):
    players: List[PlayerEntryModel]
    expansions: List[Expansion] = Field(default_factory=list)


class ContributionModel(BaseModel):
    player_id: str
    region: str
    amount: int = Field(0, ge=0)


class MajorityRequest(BaseModel):
    contributions: List[ContributionModel]


class CompetitiveRoundRequest(BaseModel):
    counts: Dict[str, int]
    player_count: Optional[int] = None


class NewPlayerRequest(BaseModel):
    name: str
    avatar_color: Optional[str] = None
    avatar_id: Optional[str] = None


class FinalizeGameRequest(BaseModel):
    mode: GoalScoringMode = GoalScoringMode.COMPETITIVE
    expansions: List[Expansion] = Field(default_factory=list)
    played_at: Optional[int] = None
    players: List[PlayerEntryModel]


def _entries(players: List[PlayerEntryModel]) -> List[PlayerScore]:
    return [
        PlayerScore(
            player_id=p.player_id,
            display_name=p.display_name,
            score=p.score.to_score_input(p.player_id) if p.score is not None else None,
        )
        for p in players
    ]


def _domain_error(exc: ScoringError) -> HTTPException:
    if isinstance(exc, RecordNotFoundError):
        return HTTPException(status_code=404, detail=str(exc))
    if isinstance(exc, DuplicateRecordError):
        return HTTPException(status_code=409, detail=str(exc))
    return HTTPException(status_code=400, detail=str(exc))


# ============================================================================
# Scoring
# ============================================================================

@router.post("/score")
async def score(request: ComposeRequest) -> Dict[str, Any]:
    """Compose one player's breakdown."""
    return compose_score(request.score.to_score_input(), request.majority_bonus).to_dict()


@router.post("/rank")
async def rank(request: RankRequest) -> Dict[str, Any]:
    """Rank a full player set."""
    try:
        results = rank_players(_entries(request.players), request.expansions)
    except ScoringError as exc:
        raise _domain_error(exc)
    return {
        "results": [r.to_dict() for r in results],
        "shared_victory": has_shared_victory(results),
    }


@router.post("/majority")
async def majority(request: MajorityRequest) -> Dict[str, int]:
    """Nectar majority points per player, summed over the regions given."""
    contributions = [
        RegionContribution(player_id=c.player_id, region=c.region, amount=c.amount)
        for c in request.contributions
    ]
    return allocate_majority_bonus(contributions)


@router.post("/round-goals/competitive")
async def competitive_round(request: CompetitiveRoundRequest) -> Dict[str, int]:
    """Resolve one competitive round from achievement counts."""
    return resolve_competitive_round(request.counts, request.player_count)


# ============================================================================
# Players and games
# ============================================================================

@router.get("/players")
async def list_players(store: InMemoryStore = Depends(get_store)) -> List[Dict[str, Any]]:
    return [p.to_dict() for p in store.all_players()]


@router.post("/players", status_code=201)
async def create_player(
    request: NewPlayerRequest, store: InMemoryStore = Depends(get_store)
) -> Dict[str, Any]:
    if store.name_exists(request.name):
        raise HTTPException(status_code=409, detail=f"Player '{request.name}' already exists")
    try:
        player = store.create_player(request.name, request.avatar_color, request.avatar_id)
    except ScoringError as exc:
        raise _domain_error(exc)
    return player.to_dict()


@router.post("/games", status_code=201)
async def finalize_game(
    request: FinalizeGameRequest, store: InMemoryStore = Depends(get_store)
) -> Dict[str, Any]:
    """Rank and store a completed game."""
    try:
        names = {}
        for entry in request.players:
            player = store.require_player(entry.player_id)
            names[entry.player_id] = entry.display_name or player.name
        session = GameSession.start_new_game(
            [p.player_id for p in request.players], names, request.mode, request.expansions
        )
        for entry in _entries(request.players):
            if entry.score is None:
                raise MissingScoreError(f"No score recorded for player '{entry.player_id}'")
            session.scores[entry.player_id] = entry.score
        saved = session.finalize(store, played_at=request.played_at)
    except ScoringError as exc:
        raise _domain_error(exc)
    logger.info("Game %s stored via API", saved.id)
    return saved.to_dict()


@router.get("/games")
async def list_games(
    limit: Optional[int] = None, store: InMemoryStore = Depends(get_store)
) -> List[Dict[str, Any]]:
    return [g.to_dict() for g in store.all_games(limit=limit)]


@router.get("/games/{game_id}")
async def get_game(game_id: str, store: InMemoryStore = Depends(get_store)) -> Dict[str, Any]:
    game = store.get_with_scores(game_id)
    if game is None:
        raise HTTPException(status_code=404, detail=f"Game '{game_id}' not found")
    return game.to_dict()


# ============================================================================
# Statistics
# ============================================================================

@router.get("/stats/leaderboard")
async def leaderboard(store: InMemoryStore = Depends(get_store)) -> List[Dict[str, Any]]:
    rows = []
    for stats in store.leaderboard():
        row = stats.to_dict()
        player = store.get_player(stats.player_id)
        row["player_name"] = player.name if player else ""
        rows.append(row)
    return rows


@router.get("/stats/players/{player_id}")
async def player_stats(player_id: str, store: InMemoryStore = Depends(get_store)) -> Dict[str, Any]:
    try:
        store.require_player(player_id)
    except ScoringError as exc:
        raise _domain_error(exc)
    out = store.player_stats(player_id).to_dict()
    out["head_to_head"] = [h.to_dict() for h in store.all_head_to_head(player_id)]
    return out
