from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from wingspan_score.api.app import app
from wingspan_score.api.routes import get_store
from wingspan_score.storage import InMemoryStore


@pytest.fixture
def store() -> InMemoryStore:
    return InMemoryStore()


@pytest.fixture
def client(store: InMemoryStore):
    app.dependency_overrides[get_store] = lambda: store
    yield TestClient(app)
    app.dependency_overrides.clear()


def _score(**kwargs):
    return kwargs


def test_health(client) -> None:
    assert client.get("/health").json() == {"status": "ok", "service": "wingspan-score"}


def test_score_endpoint(client) -> None:
    resp = client.post(
        "/api/score",
        json={
            "score": _score(
                bird_card_points=40,
                bonus_card_points=10,
                round_goals=[{"round": 1, "points": 3}, {"round": 2, "points": 2}, {"round": 3, "points": 1}],
                eggs_count=5,
                cached_food_count=2,
                tucked_cards_count=1,
            ),
            "majority_bonus": 2,
        },
    )

    assert resp.status_code == 200
    body = resp.json()
    assert body["round_goal_points"] == 6
    assert body["total"] == 66


def test_negative_input_is_rejected(client) -> None:
    resp = client.post("/api/score", json={"score": {"eggs_count": -1}})

    assert resp.status_code == 422


def test_rank_endpoint(client) -> None:
    resp = client.post(
        "/api/rank",
        json={
            "players": [
                {"player_id": "a", "display_name": "A", "score": _score(bird_card_points=20)},
                {"player_id": "b", "display_name": "B", "score": _score(bird_card_points=20)},
                {"player_id": "c", "display_name": "C", "score": _score(bird_card_points=15)},
            ]
        },
    )

    body = resp.json()
    assert [r["position"] for r in body["results"]] == [1, 1, 3]
    assert body["shared_victory"] is True


def test_rank_with_missing_score(client) -> None:
    resp = client.post("/api/rank", json={"players": [{"player_id": "a"}]})

    assert resp.status_code == 400


def test_majority_endpoint(client) -> None:
    resp = client.post(
        "/api/majority",
        json={
            "contributions": [
                {"player_id": "a", "region": "forest", "amount": 10},
                {"player_id": "b", "region": "forest", "amount": 10},
                {"player_id": "c", "region": "forest", "amount": 0},
            ]
        },
    )

    assert resp.json() == {"a": 3, "b": 3, "c": 0}


def test_competitive_round_endpoint(client) -> None:
    resp = client.post("/api/round-goals/competitive", json={"counts": {"a": 5, "b": 3, "c": 2, "d": 0}})

    assert resp.json() == {"a": 4, "b": 2, "c": 1, "d": 0}


def test_games_and_stats_flow(client, store: InMemoryStore) -> None:
    ana = client.post("/api/players", json={"name": "Ana"}).json()
    ben = client.post("/api/players", json={"name": "Ben"}).json()
    assert client.post("/api/players", json={"name": "ana"}).status_code == 409

    resp = client.post(
        "/api/games",
        json={
            "mode": "casual",
            "expansions": ["oceania"],
            "played_at": 50,
            "players": [
                {"player_id": ana["id"], "score": _score(bird_card_points=30, nectar_scores={"wetland": 1})},
                {"player_id": ben["id"], "score": _score(bird_card_points=33)},
            ],
        },
    )
    assert resp.status_code == 201
    game = resp.json()
    assert game["game"]["is_complete"] is True
    assert [(s["player_id"], s["total_score"]) for s in game["scores"]] == [(ana["id"], 35), (ben["id"], 33)]

    assert client.get(f"/api/games/{game['game']['id']}").status_code == 200
    assert len(client.get("/api/games").json()) == 1

    board = client.get("/api/stats/leaderboard").json()
    assert [row["player_name"] for row in board] == ["Ana", "Ben"]

    detail = client.get(f"/api/stats/players/{ben['id']}").json()
    assert detail["losses"] == 1
    assert detail["head_to_head"][0]["losses"] == 1


def test_unknown_player_and_game(client) -> None:
    resp = client.post("/api/games", json={"players": [{"player_id": "ghost", "score": {}}]})
    assert resp.status_code == 404
    assert client.get("/api/games/nope").status_code == 404
    assert client.get("/api/stats/players/nope").status_code == 404


def test_round_goal_points_above_cap_are_rejected(client) -> None:
    resp = client.post("/api/score", json={"score": {"round_goals": [{"round": 1, "points": 50}]}})

    assert resp.status_code == 422


def test_finalized_game_keeps_every_player(client, store: InMemoryStore) -> None:
    ana = client.post("/api/players", json={"name": "Ana"}).json()
    ben = client.post("/api/players", json={"name": "Ben"}).json()

    resp = client.post(
        "/api/games",
        json={
            "players": [
                {"player_id": ana["id"], "score": {"bird_card_points": 30}},
                {"player_id": ben["id"], "score": {"bird_card_points": 33}},
            ],
        },
    )

    assert resp.status_code == 201
    scores = resp.json()["scores"]
    assert [(s["player_id"], s["bird_card_points"], s["finish_position"]) for s in scores] == [
        (ben["id"], 33, 1),
        (ana["id"], 30, 2),
    ]
    assert [row["player_name"] for row in client.get("/api/stats/leaderboard").json()] == ["Ben", "Ana"]
