"""
Evidence scoring.

Heuristic classification is expressed as a list of independent Signals
scored by one explicit function, so every signal can be tested on its
own and every point of confidence is backed by a sentence.

INVARIANTS:
- A signal contributes weight * strength points, strength clipped to [0, 1]
- A signal with zero strength has not fired and contributes no reason
- Scores are clipped to [0, 100]
"""

from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum

MAX_SCORE = 100.0


def clip(value: float, low: float = 0.0, high: float = MAX_SCORE) -> float:
    return max(low, min(high, value))


@dataclass(frozen=True, slots=True)
class Signal:
    """
    One piece of evidence for one hypothesis.

    Attributes:
        hypothesis: What the evidence points to (e.g., a Tcg)
        weight: Points awarded at full strength
        strength: How strongly the evidence fired, 0.0 to 1.0
        reason: Human-readable sentence shown to the user
    """

    hypothesis: Enum
    weight: float
    strength: float
    reason: str

    @property
    def fired(self) -> bool:
        return self.strength > 0 and self.weight > 0

    @property
    def points(self) -> float:
        return self.weight * clip(self.strength, 0.0, 1.0)


@dataclass(frozen=True, slots=True)
class Score:
    """Clipped score and the reasons behind it."""

    points: float
    reasons: tuple[str, ...]


def score_signals(signals: Iterable[Signal], hypothesis: Enum) -> Score:
    """
    Score one hypothesis from a list of signals.

    Args:
        signals: All collected signals (any hypothesis)
        hypothesis: The hypothesis to score

    Returns:
        Score with weighted sum clipped to [0, 100] and the reasons of
        every fired signal for this hypothesis, in signal order
    """
    fired = [s for s in signals if s.hypothesis == hypothesis and s.fired]
    return Score(
        points=clip(sum(s.points for s in fired)),
        reasons=tuple(s.reason for s in fired),
    )


@dataclass(frozen=True, slots=True)
class Verdict:
    """Winner of a scored contest between hypotheses."""

    winner: Enum
    confidence: int
    reasons: tuple[str, ...]
    scores: dict[Enum, float]


def decide(
    signals: list[Signal],
    hypotheses: list[Enum],
    tie_reason: str,
) -> Verdict:
    """
    Pick the best-scoring hypothesis.

    Confidence is the margin between the winner and the runner-up,
    clipped to [0, 100]. Ties go to the first hypothesis listed, and
    tie_reason is appended to explain the choice.

    Args:
        signals: All collected signals
        hypotheses: Candidates in tie-break priority order
        tie_reason: Sentence explaining a tie-break

    Returns:
        Verdict with the reasons of every fired signal, winner's first
    """
    scores = {h: score_signals(signals, h) for h in hypotheses}
    ranked = sorted(hypotheses, key=lambda h: -scores[h].points)
    winner = ranked[0]
    runner_up = scores[ranked[1]].points if len(ranked) > 1 else 0.0

    reasons = list(scores[winner].reasons)
    for h in ranked[1:]:
        reasons.extend(scores[h].reasons)

    if scores[winner].points == runner_up:
        reasons.append(tie_reason)

    return Verdict(
        winner=winner,
        confidence=round(clip(scores[winner].points - runner_up)),
        reasons=tuple(reasons),
        scores={h: s.points for h, s in scores.items()},
    )
