"""Rule analysis: coverage, dead rules and overlaps across sample contexts."""

from itertools import combinations
from typing import Any, Dict, Iterable, List, Tuple

from pydantic import BaseModel

from syndicate_kernel.rules.table import RuleTable


class AnalysisReport(BaseModel):
    table: str
    scenarios: int
    match_counts: Dict[str, int] = {}
    win_counts: Dict[str, int] = {}
    dead_rules: List[str] = []            # Never matched
    shadowed_rules: List[str] = []        # Matched, never won
    overlaps: List[Tuple[str, str, int]] = []


def analyze_table(table: RuleTable, contexts: Iterable[Any]) -> AnalysisReport:
    """Run every context through the table without applying any effects."""
    match_counts = {r.id: 0 for r in table.rules}
    win_counts = {r.id: 0 for r in table.rules}
    pair_counts: Dict[Tuple[str, str], int] = {}
    scenarios = 0

    for ctx in contexts:
        scenarios += 1
        matched = table.matching(ctx)
        for rule in matched:
            match_counts[rule.id] += 1
        if matched:
            win_counts[matched[0].id] += 1
        ids = sorted(r.id for r in matched)
        for pair in combinations(ids, 2):
            pair_counts[pair] = pair_counts.get(pair, 0) + 1

    overlaps = sorted(
        ((a, b, n) for (a, b), n in pair_counts.items()),
        key=lambda item: (-item[2], item[0], item[1]),
    )
    return AnalysisReport(
        table=table.name,
        scenarios=scenarios,
        match_counts=match_counts,
        win_counts=win_counts,
        dead_rules=[rid for rid, n in match_counts.items() if n == 0],
        shadowed_rules=[
            rid for rid, n in match_counts.items()
            if n > 0 and win_counts[rid] == 0
        ],
        overlaps=overlaps,
    )
