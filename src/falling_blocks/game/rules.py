from __future__ import annotations

from dataclasses import dataclass


@dataclass
class ScoringRules:
    points_per_line: int = 100

    def score_for_lines(self, lines: int) -> int:
        # Linear: no bonus for clearing several rows at once
        if lines <= 0:
            return 0
        return lines * self.points_per_line
