from dataclasses import dataclass, field
from typing import Tuple

from checksum_tickler.models.block import Block


@dataclass(frozen=True, slots=True)
class CalculationStep:
    """One arithmetic operation of a checksum computation."""

    step: int
    description: str
    operand1: str
    operand2: str
    result: str
    carry: str

    @property
    def is_complement(self) -> bool:
        return self.operand2 == ""

    @property
    def had_carry(self) -> bool:
        return self.carry not in ("", "0")


@dataclass(frozen=True, slots=True)
class ChecksumResult:
    """The checksum and the ordered trace that produced it."""

    checksum: str
    steps: Tuple[CalculationStep, ...] = field(default_factory=tuple)

    @property
    def checksum_block(self) -> Block:
        return Block.from_binary(self.checksum)

    @property
    def total(self) -> str:
        """Sum of the data blocks before the complement was taken."""
        return self.steps[-1].operand1


@dataclass(frozen=True, slots=True)
class VerificationOutcome:
    is_valid: bool
    received_sum: str
    message: str
