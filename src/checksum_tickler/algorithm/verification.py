from typing import Iterable, List, Tuple

import structlog

from checksum_tickler.algorithm.checksum import add_with_carry
from checksum_tickler.models.block import (
    ALL_ONES,
    BLOCK_BITS,
    BitIndexError,
    Block,
    BlockLike,
    EmptyBlockSequenceError,
    as_blocks,
    to_binary,
)
from checksum_tickler.models.results import CalculationStep, VerificationOutcome

log = structlog.get_logger()

VALID_MESSAGE = "Data integrity verified - No errors detected!"
INVALID_MESSAGE = "Error detected - Data corruption during transmission!"


def _received_blocks(sequence: Iterable[BlockLike]) -> Tuple[Block, ...]:
    blocks = as_blocks(sequence)
    if not blocks:
        raise EmptyBlockSequenceError("A transmission must contain at least the checksum block.")
    return blocks


def verify(sequence: Iterable[BlockLike]) -> VerificationOutcome:
    """Sum every received block, checksum included. All ones means nothing was corrupted."""
    blocks = _received_blocks(sequence)

    total = 0
    for block in blocks:
        total, _ = add_with_carry(total, block.value)

    is_valid = total == ALL_ONES
    outcome = VerificationOutcome(
        is_valid=is_valid,
        received_sum=to_binary(total),
        message=VALID_MESSAGE if is_valid else INVALID_MESSAGE,
    )
    log.debug("sequence verified", block_count=len(blocks), received_sum=outcome.received_sum, is_valid=is_valid)
    return outcome


def trace_verification(sequence: Iterable[BlockLike]) -> Tuple[CalculationStep, ...]:
    """Step trace of the verification sum. The last block is treated as the checksum."""
    blocks = _received_blocks(sequence)

    steps: List[CalculationStep] = []
    total = 0
    last_index = len(blocks) - 1
    for i, block in enumerate(blocks):
        previous_sum = to_binary(total)
        total, carry = add_with_carry(total, block.value)

        label = "Checksum" if i == last_index else f"Block {i + 1}"
        description = f"Add {label}"
        if carry:
            description += " with carry wrap-around"

        steps.append(CalculationStep(
            step=i + 1,
            description=description,
            operand1=previous_sum,
            operand2=block.as_binary(),
            result=to_binary(total),
            carry=str(carry),
        ))
    return tuple(steps)


def flip_bit(sequence: Iterable[BlockLike], block_index: int, bit_index: int) -> Tuple[Block, ...]:
    """
    Simulate a transmission error by inverting one bit of one block.
    Returns a new sequence; the input is left untouched.
    """
    blocks = as_blocks(sequence)
    if isinstance(block_index, bool) or not isinstance(block_index, int) or not 0 <= block_index < len(blocks):
        raise BitIndexError(f"Block index must be between 0 and {len(blocks) - 1}, got {block_index}")
    if isinstance(bit_index, bool) or not isinstance(bit_index, int) or not 0 <= bit_index < BLOCK_BITS:
        raise BitIndexError(f"Bit index must be between 0 and {BLOCK_BITS - 1}, got {bit_index}")

    flipped = blocks[block_index].flip(bit_index)
    log.debug(
        "bit flipped",
        block_index=block_index,
        bit_index=bit_index,
        before=blocks[block_index].as_binary(),
        after=flipped.as_binary(),
    )
    return blocks[:block_index] + (flipped,) + blocks[block_index + 1:]
