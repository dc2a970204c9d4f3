"""
Confidence Scorer — how strongly the evidence backs a verdict.

Only the corroborating predicates registered for the chosen verdict count,
so a rejection is scored from rejection evidence and an acceptance from
acceptance evidence.
"""

from typing import Any, Callable, Dict, List, Tuple


class ConfidenceScorer:
    def __init__(self, base: int = 50):
        self.base = base
        self._supports: Dict[str, List[Tuple[str, Callable[[Any], bool], int]]] = {}

    def support(
        self,
        verdict: str,
        label: str,
        predicate: Callable[[Any], bool],
        delta: int,
    ) -> "ConfidenceScorer":
        """Register a corroborating predicate for a verdict."""
        self._supports.setdefault(verdict, []).append((label, predicate, delta))
        return self

    def score(self, ctx: Any, verdict: str) -> Tuple[int, List[str]]:
        """Return (confidence 0-100, labels of the predicates that held)."""
        total = self.base
        held = []
        for label, predicate, delta in self._supports.get(verdict, []):
            if predicate(ctx):
                total += delta
                held.append(label)
        return max(0, min(100, total)), held
