"""Utilities for loading game descriptions from JSON or YAML files."""
from __future__ import annotations

import json
from pathlib import Path
from typing import Any, List, Mapping, Union

import yaml

from ..config import DEFAULT_RULES, ScoringRules
from ..errors import ValidationError
from ..game_models import GoalScoringMode, ScoreInput
from ..scoring.composer import create_empty_score_input
from ..session import GameSession
from ..storage import InMemoryStore
from ..updates import (
    SetBirdCardPoints,
    SetBonusCardPoints,
    SetCachedFood,
    SetEggs,
    SetNectar,
    SetRoundGoal,
    SetTuckedCards,
    SetUnusedFoodTokens,
    apply_update,
)
from ..validators import clamp_non_negative, validate_round_goal_input, validate_score_input


PathLike = Union[str, Path]


def read_payload(path: PathLike) -> Any:
    """Read a JSON or YAML document.

    ``.json`` files go through :mod:`json`; anything else is parsed as YAML.
    """
    candidate = Path(path)
    if not candidate.exists():
        raise FileNotFoundError(f"Game file not found: {path}")
    with candidate.open("r", encoding="utf-8") as handle:
        if candidate.suffix.lower() == ".json":
            return json.load(handle)
        return yaml.safe_load(handle)


_FIELD_UPDATES = {
    "bird_card_points": SetBirdCardPoints,
    "bonus_card_points": SetBonusCardPoints,
    "eggs_count": SetEggs,
    "cached_food_count": SetCachedFood,
    "tucked_cards_count": SetTuckedCards,
    "unused_food_tokens": SetUnusedFoodTokens,
}


def _checked(value: Any, label: str, check) -> int:
    # Negative whole numbers clamp to 0; anything else must pass ``check``.
    if isinstance(value, int) and not isinstance(value, bool):
        value = clamp_non_negative(value)
    result = check(value)
    if not result.valid:
        raise ValidationError(f"{label}: {result.error} (got {value!r})")
    return value


def score_from_dict(
    player_id: str,
    raw: Mapping[str, Any],
    mode: GoalScoringMode = GoalScoringMode.COMPETITIVE,
) -> ScoreInput:
    """Build a :class:`ScoreInput` from file data through the normal update path.

    Raises :class:`ValidationError` for unknown keys, non-integer values,
    out-of-range values and round-goal points above the per-round cap.
    """
    score = create_empty_score_input(player_id)
    for key, value in raw.items():
        if key == "player_id":
            continue
        label = f"{player_id}.{key}"
        if key in _FIELD_UPDATES:
            score = apply_update(score, _FIELD_UPDATES[key](_checked(value, label, validate_score_input)))
        elif key == "round_goals":
            for goal in value or []:
                round_number = goal.get("round")
                if isinstance(round_number, bool) or not isinstance(round_number, int):
                    raise ValidationError(f"{label}: round must be a whole number (got {round_number!r})")
                points = _checked(
                    goal.get("points", 0),
                    f"{label}[{round_number}]",
                    lambda v: validate_round_goal_input(v, mode),
                )
                score = apply_update(score, SetRoundGoal(round=round_number, points=points))
        elif key == "nectar_scores":
            for habitat, amount in (value or {}).items():
                amount = _checked(amount, f"{label}.{habitat}", validate_score_input)
                score = apply_update(score, SetNectar(habitat=str(habitat), amount=amount))
        else:
            raise ValidationError(f"Unknown score field '{key}' for player '{player_id}'")
    return score


def session_from_dict(payload: Mapping[str, Any], rules: ScoringRules = DEFAULT_RULES) -> GameSession:
    """Build a :class:`GameSession` from a game description.

    Expected shape::

        mode: competitive
        expansions: [oceania]
        players:
          - id: p1
            name: Alice
            score: {bird_card_points: 40, eggs_count: 5, ...}
    """
    players: List[Mapping[str, Any]] = list(payload.get("players") or [])
    player_ids = [str(p["id"]) for p in players]
    names = {str(p["id"]): str(p.get("name", p["id"])) for p in players}
    session = GameSession.start_new_game(
        player_ids,
        names,
        mode=payload.get("mode", "competitive"),
        expansions=payload.get("expansions") or (),
        rules=rules,
    )
    if payload.get("id"):
        session.game_id = str(payload["id"])
    for entry in players:
        pid = str(entry["id"])
        session.scores[pid] = score_from_dict(pid, entry.get("score") or {}, session.mode)
    return session


def load_session(path: PathLike, rules: ScoringRules = DEFAULT_RULES) -> GameSession:
    return session_from_dict(read_payload(path), rules)


def load_history(path: PathLike, rules: ScoringRules = DEFAULT_RULES) -> InMemoryStore:
    """Load a history file (``players`` plus ``games``) into a fresh store.

    Each game entry uses the :func:`session_from_dict` shape plus an optional
    ``played_at`` timestamp in milliseconds.
    """
    payload = read_payload(path) or {}
    store = InMemoryStore()
    for player in payload.get("players") or []:
        store.create_player(
            str(player["name"]),
            avatar_color=player.get("avatar_color"),
            player_id=str(player["id"]),
        )
    for index, game in enumerate(payload.get("games") or []):
        session = session_from_dict(game, rules)
        session.finalize(store, played_at=int(game.get("played_at", index)))
    return store


__all__ = ["read_payload", "score_from_dict", "session_from_dict", "load_session", "load_history"]
