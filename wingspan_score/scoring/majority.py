"""Nectar majority scoring (Oceania expansion).

For each habitat, players are compared by the nectar they spent there. The
single leader takes the first-place award and the next amount down splits the
second-place award. When the lead is tied, the tied players split both awards
together and nobody else scores in that habitat. Players who spent nothing
never score. All splits are floored.
"""
from __future__ import annotations

import logging
from itertools import groupby
from typing import Dict, Iterable, List, Sequence

from ..config import DEFAULT_RULES, ScoringRules
from ..data.constants import HABITATS
from ..game_models import RegionContribution, ScoreInput

logger = logging.getLogger(__name__)


def _split(pool: int, members: Sequence[str], out: Dict[str, int]) -> None:
    share = pool // len(members)
    for pid in members:
        out[pid] += share


def allocate(
    contributions: Iterable[RegionContribution], rules: ScoringRules = DEFAULT_RULES
) -> Dict[str, int]:
    """Award majority points for a single region."""
    contributions = list(contributions)
    out: Dict[str, int] = {c.player_id: 0 for c in contributions}

    qualifying = [c for c in contributions if c.amount > 0]
    if not qualifying:
        return out
    qualifying.sort(key=lambda c: c.amount, reverse=True)
    groups: List[List[str]] = [
        [c.player_id for c in grp] for _, grp in groupby(qualifying, key=lambda c: c.amount)
    ]

    leaders = groups[0]
    if len(leaders) == 1:
        out[leaders[0]] += rules.nectar_first
        if len(groups) > 1:
            _split(rules.nectar_second, groups[1], out)
    else:
        _split(rules.nectar_first + rules.nectar_second, leaders, out)
    return out


def contributions_from_inputs(
    scores: Iterable[ScoreInput], regions: Sequence[str] = HABITATS
) -> List[RegionContribution]:
    out: List[RegionContribution] = []
    for score in scores:
        nectar = score.nectar_scores or {}
        for region in regions:
            out.append(
                RegionContribution(
                    player_id=score.player_id,
                    region=region,
                    amount=int(nectar.get(region, 0) or 0),
                )
            )
    return out


def allocate_majority_bonus(
    all_contributions: Iterable[RegionContribution], rules: ScoringRules = DEFAULT_RULES
) -> Dict[str, int]:
    """Sum per-region awards for contributions spanning any number of regions."""
    by_region: Dict[str, List[RegionContribution]] = {}
    totals: Dict[str, int] = {}
    for c in all_contributions:
        by_region.setdefault(c.region, []).append(c)
        totals.setdefault(c.player_id, 0)
    for region, entries in by_region.items():
        awarded = allocate(entries, rules)
        logger.debug("Nectar majority in %s: %s", region, awarded)
        for pid, points in awarded.items():
            totals[pid] += points
    return totals


def allocate_all(
    scores: Iterable[ScoreInput],
    regions: Sequence[str] = HABITATS,
    rules: ScoringRules = DEFAULT_RULES,
) -> Dict[str, int]:
    """Majority bonus per player across every habitat."""
    scores = list(scores)
    totals = allocate_majority_bonus(contributions_from_inputs(scores, regions), rules)
    for score in scores:
        totals.setdefault(score.player_id, 0)
    return totals


__all__ = [
    "allocate",
    "allocate_all",
    "allocate_majority_bonus",
    "contributions_from_inputs",
]
