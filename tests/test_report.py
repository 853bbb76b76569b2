from __future__ import annotations

import json

from wingspan_score.game_models import Expansion, GoalScoringMode, ScoreInput
from wingspan_score.reports.results_report import ResultsReport
from wingspan_score.scoring import PlayerScore, rank_players


def _results():
    return rank_players(
        [
            PlayerScore("a", "Ada", ScoreInput(player_id="a", bird_card_points=30, unused_food_tokens=1)),
            PlayerScore("b", "Bo", ScoreInput(player_id="b", bird_card_points=30, unused_food_tokens=1)),
            PlayerScore("c", "", ScoreInput(player_id="c", bird_card_points=12)),
        ]
    )


def test_report_json_shape() -> None:
    report = ResultsReport.from_results(_results(), game_id="g1", mode=GoalScoringMode.CASUAL)

    payload = json.loads(report.to_json())
    assert payload["mode"] == "casual"
    assert payload["shared_victory"] is True
    assert [row["position"] for row in payload["rows"]] == [1, 1, 3]
    assert payload["rows"][2]["name"] == "c"
    assert payload["rows"][0]["breakdown"]["total"] == 30


def test_report_markdown_marks_shared_victory() -> None:
    text = ResultsReport.from_results(_results()).to_markdown()

    assert "**Shared victory:** Ada, Bo" in text
    assert "| 3rd | c | 12 | 0 |" in text
    assert "Nectar" not in text


def test_report_markdown_single_winner_with_oceania() -> None:
    results = rank_players(
        [PlayerScore("a", "Ada", ScoreInput(player_id="a", bird_card_points=5))],
        expansions=[Expansion.OCEANIA],
    )

    text = ResultsReport.from_results(results, expansions=[Expansion.OCEANIA]).to_markdown()

    assert "**Winner:** Ada" in text
    assert "Nectar" in text


def test_report_markdown_labels_and_tiebreaker_note() -> None:
    text = ResultsReport.from_results(_results()).to_markdown()

    assert "| Place | Player | Total | Food | Bird Cards | Bonus Cards | Round Goals | Eggs |" in text
    assert "_Ties: most unused food tokens, then shared victory._" in text
