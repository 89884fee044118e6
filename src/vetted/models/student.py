"""Student entity holding an ordered sequence of bounded scores."""

from __future__ import annotations

from statistics import mean

from vetted.domain.types import Score
from vetted.entity import MutationResult, ValidatedEntity, derived, sequence, validated
from vetted.entity.rules import in_range, is_number, max_length, not_blank

_LETTERS = ((90, "A"), (80, "B"), (70, "C"), (60, "D"))


def _as_floats(scores: tuple[Score, ...]) -> list[float]:
    # Decimal and float scores cannot be mixed in statistics.mean.
    return [float(score) for score in scores]


class GradedStudent(ValidatedEntity):
    __slots__ = ()

    name = validated(not_blank() & max_length(100))
    scores = sequence(is_number() & in_range(0, 100))

    @derived(default=0)
    def average(self) -> float:
        """Arithmetic mean of the recorded scores."""
        return mean(_as_floats(self.scores))

    @derived(default=None)
    def highest(self) -> Score | None:
        return max(self.scores)

    @derived(default=None)
    def lowest(self) -> Score | None:
        return min(self.scores)

    @derived(default=0)
    def count(self) -> int:
        return len(self.scores)

    @derived(default="N/A")
    def letter_grade(self) -> str:
        average = mean(_as_floats(self.scores))
        for threshold, letter in _LETTERS:
            if average >= threshold:
                return letter
        return "F"

    def add_score(self, score: Score) -> MutationResult:
        return self.append("scores", score)


__all__ = ["GradedStudent"]
