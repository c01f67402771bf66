from typing import Iterable, List, Tuple

import structlog

from checksum_tickler.models.block import (
    BLOCK_BITS,
    BLOCK_MASK,
    BlockLike,
    EmptyBlockSequenceError,
    as_blocks,
    to_binary,
)
from checksum_tickler.models.results import CalculationStep, ChecksumResult

log = structlog.get_logger()

COMPLEMENT_DESCRIPTION = "Calculate 1's complement (flip all bits)"


def add_with_carry(total: int, value: int) -> Tuple[int, int]:
    """
    Add an 8-bit value to the running sum and fold any carry-out back into the low byte.
    Returns (new_total, carry). carry is 0 when the addition did not overflow.

    The running sum entering this function is at most 0xFF, so the raw sum is at most
    0x1FE and a single fold always lands back in range.
    """
    total += value
    if total > BLOCK_MASK:
        carry = total >> BLOCK_BITS
        total = (total & BLOCK_MASK) + carry
        return total, carry
    return total, 0


def ones_complement(total: int) -> int:
    return ~total & BLOCK_MASK


def compute_checksum(blocks: Iterable[BlockLike]) -> ChecksumResult:
    """
    Compute the one's complement checksum of 8-bit blocks with an auditable trace.
    - blocks: non-empty sequence of Block, 8-bit binary strings or ints in [0, 255]
    Returns the checksum and one step per block plus the final complement step.
    """
    blocks = as_blocks(blocks)
    if not blocks:
        raise EmptyBlockSequenceError("Please add at least one data block first.")

    steps: List[CalculationStep] = []
    total = 0

    for i, block in enumerate(blocks):
        previous_sum = "0" * BLOCK_BITS if i == 0 else to_binary(total)
        total, carry = add_with_carry(total, block.value)

        description = f"Add Block {i + 1}"
        if carry:
            description += " with carry wrap-around"

        steps.append(CalculationStep(
            step=len(steps) + 1,
            description=description,
            operand1=previous_sum,
            operand2=block.as_binary(),
            result=to_binary(total),
            carry=str(carry),
        ))

    complement = ones_complement(total)
    steps.append(CalculationStep(
        step=len(steps) + 1,
        description=COMPLEMENT_DESCRIPTION,
        operand1=to_binary(total),
        operand2="",
        result=to_binary(complement),
        carry="",
    ))

    result = ChecksumResult(checksum=to_binary(complement), steps=tuple(steps))
    log.debug(
        "checksum computed",
        block_count=len(blocks),
        total=result.total,
        checksum=result.checksum,
    )
    return result
