from __future__ import annotations
import re
from dataclasses import dataclass
from typing import Iterable, Literal, Tuple, Union

BLOCK_BITS = 8
BLOCK_MASK = 0xFF
ALL_ONES = 0xFF

BINARY_PATTERN = re.compile(r"[01]{8}")

type InputType = Literal["binary", "decimal"]
type BlockLike = Union["Block", str, int]


class BlockFormatError(ValueError):
    pass


class EmptyBlockSequenceError(ValueError):
    pass


class BitIndexError(IndexError):
    pass


def to_binary(value: int) -> str:
    """Format an 8-bit value as a zero-padded binary string."""
    return f"{value & BLOCK_MASK:0{BLOCK_BITS}b}"


@dataclass(frozen=True, slots=True)
class Block:
    """One immutable 8-bit unit of data."""

    value: int

    def __post_init__(self):
        if isinstance(self.value, bool) or not isinstance(self.value, int):
            raise BlockFormatError(f"Block value must be an int, got {type(self.value).__name__}")
        if not 0 <= self.value <= BLOCK_MASK:
            raise BlockFormatError(f"Block value must be between 0 and {BLOCK_MASK}, got {self.value}")

    @classmethod
    def from_binary(cls, text: str) -> Block:
        if not isinstance(text, str) or not BINARY_PATTERN.fullmatch(text):
            raise BlockFormatError("Please enter exactly 8 binary digits (0s and 1s)")
        return cls(int(text, 2))

    @classmethod
    def from_decimal(cls, text: Union[str, int]) -> Block:
        try:
            value = int(text)
        except (TypeError, ValueError):
            raise BlockFormatError("Please enter a decimal number between 0 and 255") from None
        if not 0 <= value <= BLOCK_MASK:
            raise BlockFormatError("Please enter a decimal number between 0 and 255")
        return cls(value)

    @classmethod
    def parse(cls, text: str, input_type: InputType = "binary") -> Block:
        if input_type == "binary":
            return cls.from_binary(text.strip())
        elif input_type == "decimal":
            return cls.from_decimal(text.strip())
        else:
            raise ValueError(f"Invalid input type: {input_type}")

    def as_binary(self) -> str:
        return to_binary(self.value)

    def flip(self, bit_index: int) -> Block:
        """Invert one bit. Bit 0 is the leftmost character of the binary string."""
        if isinstance(bit_index, bool) or not isinstance(bit_index, int) or not 0 <= bit_index < BLOCK_BITS:
            raise BitIndexError(f"Bit index must be between 0 and {BLOCK_BITS - 1}, got {bit_index}")
        return Block(self.value ^ (1 << (BLOCK_BITS - 1 - bit_index)))

    def __int__(self) -> int:
        return self.value

    def __str__(self) -> str:
        return self.as_binary()


def as_block(item: BlockLike) -> Block:
    """Coerce a Block, exact 8-bit binary string or int into a Block."""
    if isinstance(item, Block):
        return item
    if isinstance(item, str):
        return Block.from_binary(item)
    return Block(item)


def as_blocks(items: Iterable[BlockLike]) -> Tuple[Block, ...]:
    return tuple(as_block(item) for item in items)
