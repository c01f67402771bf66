from typing import Iterable, List, Tuple

from checksum_tickler.models.block import (
    Block,
    BlockFormatError,
    BlockLike,
    InputType,
    as_blocks,
)

INPUT_TYPES = ("binary", "decimal")

SAMPLE_BLOCKS: Tuple[Block, ...] = (
    Block.from_binary("11010011"),
    Block.from_binary("10101010"),
    Block.from_binary("01110100"),
)


def parse_block_input(text: str, input_type: InputType = "binary") -> Block:
    """Parse a single block typed by a user as 8 binary digits or a decimal in [0, 255]."""
    if input_type not in INPUT_TYPES:
        raise ValueError(f"Invalid input type: {input_type}")
    return Block.parse(text, input_type)


def parse_block_inputs(values: Iterable[str], input_type: InputType = "binary") -> Tuple[Block, ...]:
    return tuple(parse_block_input(value, input_type) for value in values)


def load_blocks(file_path: str, input_type: InputType = "binary") -> Tuple[Block, ...]:
    """Load whitespace separated blocks from a text file."""
    with open(file_path, "r", encoding="utf-8") as f:
        data = f.read()
    return parse_block_inputs(data.split(), input_type)


def build_transmission(blocks: Iterable[BlockLike], checksum: BlockLike) -> str:
    """ Join the data blocks and the checksum into the transmitted packet text. """
    sequence = as_blocks(blocks) + as_blocks([checksum])
    return format_sequence(sequence)


def format_sequence(sequence: Iterable[BlockLike]) -> str:
    return " ".join(block.as_binary() for block in as_blocks(sequence))


def split_transmission(packet: str) -> Tuple[Block, ...]:
    """Split packet text back into blocks. The last block is the checksum."""
    tokens: List[str] = packet.split()
    if not tokens:
        raise BlockFormatError("Transmission packet is empty")
    return tuple(Block.from_binary(token) for token in tokens)


def describe_flip(block_index: int, bit_index: int) -> str:
    return f"Simulated transmission error in block {block_index + 1}, bit {bit_index + 1}"


def parse_flip_spec(spec: str) -> Tuple[int, int]:
    """ Parse a 'BLOCK:BIT' flip request using 1-based positions, as shown to users. """
    try:
        block_text, bit_text = spec.split(":")
        block_number, bit_number = int(block_text), int(bit_text)
    except ValueError:
        raise ValueError(f"Flip must look like BLOCK:BIT (e.g. 1:3), got {spec!r}") from None
    return block_number - 1, bit_number - 1
