from dataclasses import dataclass, field
from typing import Optional, Tuple

from checksum_tickler.models.block import Block
from checksum_tickler.models.results import CalculationStep


@dataclass(frozen=True, slots=True)
class WalkthroughSnapshot:
    """Immutable view of a checksum replay at one step."""

    state_version: int
    complete: bool
    step_index: int
    step_count: int

    blocks: Tuple[Block, ...] = field(default_factory=tuple)
    steps: Tuple[CalculationStep, ...] = field(default_factory=tuple)
    checksum: str = ""

    @property
    def current_step(self) -> Optional[CalculationStep]:
        if 0 <= self.step_index < len(self.steps):
            return self.steps[self.step_index]
        return None

    @property
    def visible_steps(self) -> Tuple[CalculationStep, ...]:
        """Steps revealed so far, the current one included."""
        if self.complete:
            return self.steps
        return self.steps[:self.step_index + 1]
