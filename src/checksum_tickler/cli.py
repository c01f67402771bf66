import functools
import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Optional, Sequence, Tuple

import click
import requests
import structlog
from rich.console import Console

from checksum_tickler import api_client
from checksum_tickler.algorithm import verification
from checksum_tickler.algorithm.checksum import compute_checksum
from checksum_tickler.models.block import Block, BitIndexError, BlockFormatError
from checksum_tickler.models.results import ChecksumResult
from checksum_tickler.state_queue import SingleSlotQueue
from checksum_tickler.state_snapshot import WalkthroughSnapshot
from checksum_tickler.ui import render_trace, render_verification, ui_loop
from checksum_tickler.utils import (
    INPUT_TYPES,
    SAMPLE_BLOCKS,
    InputType,
    build_transmission,
    describe_flip,
    load_blocks,
    parse_block_inputs,
    parse_flip_spec,
    split_transmission,
)
from checksum_tickler.walkthrough import DEFAULT_DELAY, replay_calculation

console = Console()


def configure_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    structlog.configure(wrapper_class=structlog.make_filtering_bound_logger(level))


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Show debug logs from the checksum engines")
def cli(verbose: bool):
    configure_logging(verbose)


def resolve_blocks(
    values: Sequence[str],
    input_type: InputType = "binary",
    file_path: Optional[str] = None,
    sample: bool = False,
) -> Tuple[Block, ...]:
    """Turn command line input into data blocks."""
    if sample:
        return SAMPLE_BLOCKS
    try:
        if file_path:
            blocks = load_blocks(file_path, input_type)
        else:
            blocks = parse_block_inputs(values, input_type)
    except BlockFormatError as e:
        raise click.BadParameter(str(e), param_hint="BLOCKS")
    if not blocks:
        raise click.UsageError("No data to calculate. Please add at least one data block first.")
    return blocks


def resolve_sequence(values: Sequence[str], packet: Optional[str]) -> Tuple[Block, ...]:
    """Turn command line input into a received sequence, checksum last."""
    try:
        if packet:
            return split_transmission(packet)
        if not values:
            raise click.UsageError("Nothing to verify. Pass blocks or --packet.")
        return parse_block_inputs(values, "binary")
    except BlockFormatError as e:
        raise click.BadParameter(str(e), param_hint="BLOCKS")


def apply_flips(sequence: Tuple[Block, ...], flips: Sequence[str]) -> Tuple[Tuple[Block, ...], list[str]]:
    notes = []
    for spec in flips:
        try:
            block_index, bit_index = parse_flip_spec(spec)
            sequence = verification.flip_bit(sequence, block_index, bit_index)
        except (ValueError, BitIndexError) as e:
            raise click.BadParameter(str(e), param_hint="--flip")
        notes.append(describe_flip(block_index, bit_index))
    return sequence, notes


def block_input_options(fn):
    fn = click.option("--sample", is_flag=True, help="Use the three demonstration blocks")(fn)
    fn = click.option("--file", "-f", "file_path", type=click.Path(exists=True, dir_okay=False),
                      help="Read whitespace separated blocks from a file")(fn)
    fn = click.option("--input-type", "-t", type=click.Choice(INPUT_TYPES), default="binary",
                      help="How BLOCKS are written")(fn)
    fn = click.argument("blocks", nargs=-1)(fn)
    return fn


def flip_options(fn):
    fn = click.option("--flip", "flips", multiple=True, metavar="BLOCK:BIT",
                      help="Invert a bit before verifying (1-based, bit 1 is the leftmost)")(fn)
    fn = click.option("--packet", "-p", help="Space separated transmission with the checksum last")(fn)
    fn = click.argument("blocks", nargs=-1)(fn)
    return fn


def api_errors(fn):
    """Report API failures as command errors instead of tracebacks."""
    @functools.wraps(fn)
    def wrapper(*args, **kwargs):
        try:
            return fn(*args, **kwargs)
        except (ValueError, requests.RequestException) as e:
            raise click.ClickException(str(e))
    return wrapper


def walkthrough_runner(blocks: Tuple[Block, ...], delay: float) -> ChecksumResult:
    """Animate the checksum computation step by step."""
    result = compute_checksum(blocks)
    state_queue: SingleSlotQueue[WalkthroughSnapshot] = SingleSlotQueue()

    with ThreadPoolExecutor() as executor:
        future = executor.submit(replay_calculation, result, blocks, state_queue, delay=delay)

        try:
            ui_loop(state_queue)
        except KeyboardInterrupt:
            state_queue.close()

        future.result()
    return result


@cli.command()
@block_input_options
def calculate(blocks: Tuple[str, ...], input_type: InputType, file_path: Optional[str], sample: bool):
    """Calculate the checksum of BLOCKS and show every step."""
    data_blocks = resolve_blocks(blocks, input_type, file_path, sample)
    result = compute_checksum(data_blocks)
    console.print(render_trace(result, data_blocks))


@cli.command()
@flip_options
def verify(blocks: Tuple[str, ...], packet: Optional[str], flips: Tuple[str, ...]):
    """Verify a received sequence (data blocks followed by the checksum)."""
    sequence = resolve_sequence(blocks, packet)
    sequence, notes = apply_flips(sequence, flips)
    outcome = verification.verify(sequence)
    console.print(render_verification(sequence, outcome, notes))
    if not outcome.is_valid:
        raise SystemExit(1)


@cli.command()
@block_input_options
@click.option("--delay", "-d", type=click.FloatRange(min=0), default=DEFAULT_DELAY, show_default=True,
              help="Seconds to hold each step")
def walkthrough(blocks: Tuple[str, ...], input_type: InputType, file_path: Optional[str], sample: bool, delay: float):
    """Animate the checksum calculation one step at a time."""
    data_blocks = resolve_blocks(blocks, input_type, file_path, sample)
    result = walkthrough_runner(data_blocks, delay)
    click.echo(f"Transmit: {build_transmission(data_blocks, result.checksum)}")


@cli.group()
@click.option("--endpoint", "-e", default=api_client.DEFAULT_ENDPOINT, show_default=True,
              envvar="CHECKSUM_TICKLER_ENDPOINT", help="Base URL of the checksum API")
@click.pass_context
def remote(ctx: click.Context, endpoint: str):
    """Run the calculations through a running checksum API."""
    ctx.obj = endpoint


@remote.command("calculate")
@block_input_options
@click.pass_obj
@api_errors
def remote_calculate(endpoint: str, blocks: Tuple[str, ...], input_type: InputType, file_path: Optional[str], sample: bool):
    """Calculate a checksum through the API."""
    if sample:
        data_blocks = api_client.fetch_sample(endpoint)
    else:
        data_blocks = resolve_blocks(blocks, input_type, file_path)
    result = api_client.remote_checksum(data_blocks, endpoint)
    console.print(render_trace(result, data_blocks))


@remote.command("verify")
@flip_options
@click.pass_obj
@api_errors
def remote_verify(endpoint: str, blocks: Tuple[str, ...], packet: Optional[str], flips: Tuple[str, ...]):
    """Verify a received sequence through the API."""
    sequence = resolve_sequence(blocks, packet)
    notes = []
    for spec in flips:
        try:
            block_index, bit_index = parse_flip_spec(spec)
        except ValueError as e:
            raise click.BadParameter(str(e), param_hint="--flip")
        sequence = api_client.remote_flip(sequence, block_index, bit_index, endpoint)
        notes.append(describe_flip(block_index, bit_index))
    outcome = api_client.remote_verify(sequence, endpoint)
    console.print(render_verification(sequence, outcome, notes))
    if not outcome.is_valid:
        raise SystemExit(1)


@cli.command("api")
@click.option("--host", default="127.0.0.1", help="Host to bind the server to")
@click.option("--port", default=8000, help="Port to bind the server to")
@click.option("--reload", is_flag=True, help="Enable auto-reload for development")
def api(host: str, port: int, reload: bool):
    """Start the checksum API server."""
    import uvicorn
    from checksum_api.api import app

    click.echo(f"Starting checksum API server on http://{host}:{port}")
    click.echo("Available endpoints:")
    click.echo("  - GET  /api/sample   - Demonstration blocks")
    click.echo("  - POST /api/checksum - Calculate a checksum with its steps")
    click.echo("  - POST /api/verify   - Verify a received sequence")
    click.echo("  - POST /api/flip     - Invert one bit of a sequence")
    click.echo("\nPress Ctrl+C to stop the server")

    if reload:
        # Use import string for reload mode
        uvicorn.run("checksum_api.api:app", host=host, port=port, reload=True)
    else:
        uvicorn.run(app, host=host, port=port, reload=False)


if __name__ == "__main__":
    cli()
