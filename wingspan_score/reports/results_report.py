from __future__ import annotations
from dataclasses import dataclass, asdict
from typing import Any, Dict, Iterable, List
from datetime import datetime, timezone
import json

from ..data.constants import ALL_SCORING_CATEGORIES, CATEGORY_INFO, TIEBREAKER_INFO
from ..game_models import Expansion, GoalScoringMode, RankedResult
from ..scoring.ranking import format_position, has_shared_victory

# Category name -> ScoreBreakdown field.
_BREAKDOWN_FIELDS = {
    "bird_cards": "bird_card_points",
    "bonus_cards": "bonus_card_points",
    "round_goals": "round_goal_points",
    "eggs": "eggs_points",
    "cached_food": "cached_food_points",
    "tucked_cards": "tucked_cards_points",
    "nectar": "nectar_points",
}


@dataclass
class ResultRow:
    position: int
    player_id: str
    name: str
    total: int
    unused_food: int
    winner: bool
    breakdown: Dict[str, int]


@dataclass
class ResultsReport:
    timestamp: str
    game_id: str
    mode: str
    expansions: List[str]
    shared_victory: bool
    rows: List[ResultRow]

    @classmethod
    def from_results(
        cls,
        results: Iterable[RankedResult],
        game_id: str = "",
        mode: GoalScoringMode = GoalScoringMode.COMPETITIVE,
        expansions: Iterable[Expansion] = (),
    ) -> "ResultsReport":
        results = list(results)
        rows = [
            ResultRow(
                position=r.position,
                player_id=r.player_id,
                name=r.display_name or r.player_id,
                total=r.total_score,
                unused_food=r.tiebreaker_value,
                winner=r.is_winner,
                breakdown=r.breakdown.to_dict(),
            )
            for r in results
        ]
        return cls(
            timestamp=datetime.now(timezone.utc).isoformat(timespec="seconds"),
            game_id=game_id,
            mode=GoalScoringMode(mode).value,
            expansions=[Expansion(e).value for e in expansions],
            shared_victory=has_shared_victory(results),
            rows=rows,
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), indent=2, sort_keys=False)

    def to_markdown(self) -> str:
        show_nectar = Expansion.OCEANIA.value in self.expansions
        columns = [
            (CATEGORY_INFO[name][0], _BREAKDOWN_FIELDS[name])
            for name in ALL_SCORING_CATEGORIES
            if show_nectar or name != "nectar"
        ]
        lines = []
        lines.append("# Wingspan Results")
        lines.append(f"- **Mode:** {self.mode}  |  **Expansions:** {', '.join(self.expansions) or 'none'}")
        if self.game_id:
            lines.append(f"- **Game:** {self.game_id}")
        winners = [row.name for row in self.rows if row.winner]
        if self.shared_victory:
            lines.append(f"- **Shared victory:** {', '.join(winners)}")
        elif winners:
            lines.append(f"- **Winner:** {winners[0]}")
        lines.append("")
        header = ["Place", "Player", "Total", "Food"] + [label for label, _ in columns]
        lines.append("| " + " | ".join(header) + " |")
        lines.append("|" + "---|" * len(header))
        for row in self.rows:
            cells = [format_position(row.position), row.name, str(row.total), str(row.unused_food)]
            cells += [str(row.breakdown.get(key, 0)) for _, key in columns]
            lines.append("| " + " | ".join(cells) + " |")
        lines.append("")
        lines.append(f"_Ties: {TIEBREAKER_INFO['primary'].lower()}, then {TIEBREAKER_INFO['secondary'].lower()}._")
        return "\n".join(lines)


__all__ = ["ResultRow", "ResultsReport"]
