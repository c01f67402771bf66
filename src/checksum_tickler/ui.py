from typing import Iterable, Literal, Optional, Sequence

from rich.console import Group
from rich.live import Live
from rich.panel import Panel
from rich.table import Table

from checksum_tickler.models.block import BlockLike, as_blocks
from checksum_tickler.models.results import CalculationStep, ChecksumResult, VerificationOutcome
from checksum_tickler.state_queue import SingleSlotQueue
from checksum_tickler.state_snapshot import WalkthroughSnapshot


COLORS = {
    "current_step": "bold yellow on black",
    "carry": "bold magenta",
    "operand": {
        "pending": "grey50",
        "done": "bright_blue",
    },
    "result": {
        "pending": "grey50",
        "done": "turquoise2",
    },
    "checksum": "bold spring_green2",
    "valid": "bold green",
    "invalid": "bold red",
}

type StepState = Literal["pending", "done", "current"]


def bits_to_string(bits: str, style: str) -> str:
    if not bits:
        return ""
    return f"[{style}]{bits}[/{style}]"


def step_row(step: CalculationStep, step_state: StepState) -> list[str]:
    """Table cells for one calculation step."""
    if step_state == "current":
        style = COLORS["current_step"]
        operand_style = result_style = style
    elif step_state in ("pending", "done"):
        style = ""
        operand_style = COLORS["operand"][step_state]
        result_style = COLORS["result"][step_state]
    else:
        raise ValueError(f"Invalid step state: {step_state}")

    carry = step.carry
    if step.had_carry:
        carry = f"[{COLORS['carry']}]{carry}[/{COLORS['carry']}]"

    description = f"[{style}]{step.description}[/{style}]" if style else step.description
    return [
        str(step.step),
        description,
        bits_to_string(step.operand1, operand_style),
        bits_to_string(step.operand2, operand_style),
        bits_to_string(step.result, result_style),
        carry,
    ]


def steps_table(steps: Sequence[CalculationStep], title: str, current_index: int = -1) -> Table:
    table = Table(title=title)
    table.add_column("Step", justify="right")
    table.add_column("Description")
    table.add_column("Operand 1")
    table.add_column("Operand 2")
    table.add_column("Result")
    table.add_column("Carry", justify="right")

    for index, step in enumerate(steps):
        if current_index < 0:
            step_state = "done"
        elif index == current_index:
            step_state = "current"
        elif index < current_index:
            step_state = "done"
        else:
            step_state = "pending"
        table.add_row(*step_row(step, step_state))
    return table


def column_addition(step: CalculationStep) -> Panel:
    """Lay a step out the way it is worked by hand."""
    if step.is_complement:
        lines = [
            f"    {step.operand1}",
            "  ~ --------",
            f"  = [{COLORS['checksum']}]{step.result}[/{COLORS['checksum']}]",
        ]
    else:
        lines = [
            f"    {step.operand1}",
            f"  + {step.operand2}",
            "    --------",
            f"  = {step.result}",
        ]
        if step.had_carry:
            lines.append(f"  [{COLORS['carry']}]carry {step.carry} wrapped around into the low bit[/{COLORS['carry']}]")
    return Panel("\n".join(lines), title=f"Step {step.step}: {step.description}", border_style="blue")


def render(state: Optional[WalkthroughSnapshot]):
    """Render the walkthrough snapshot."""
    if state is None:
        return Panel("Waiting for first update…", title="Checksum Walkthrough", border_style="dim")

    if state.step_count != len(state.steps):
        raise ValueError("Step count does not match the number of steps")

    blocks = " ".join(block.as_binary() for block in state.blocks)
    if state.complete:
        title = f"Done  |  {state.step_count} steps  |  v{state.state_version}"
        table = steps_table(state.steps, title)
        footer = Panel(
            f"Checksum: [{COLORS['checksum']}]{state.checksum}[/{COLORS['checksum']}]\n"
            f"Transmit: {blocks} [{COLORS['checksum']}]{state.checksum}[/{COLORS['checksum']}]",
            title="Result",
            border_style="green",
        )
        return Group(table, footer)

    title = f"Step {state.step_index + 1} / {state.step_count}  |  v{state.state_version}"
    table = steps_table(state.steps, title, current_index=state.step_index)
    return Group(Panel(blocks, title="Data Blocks", border_style="dim"), table, column_addition(state.current_step))


def render_trace(result: ChecksumResult, blocks: Iterable[BlockLike] = ()) -> Group:
    """Static rendering of a whole checksum computation."""
    parts = [steps_table(result.steps, "Checksum Calculation")]
    blocks = as_blocks(blocks)
    summary = f"Sum: {result.total}\nChecksum: [{COLORS['checksum']}]{result.checksum}[/{COLORS['checksum']}] ({int(result.checksum, 2)})"
    if blocks:
        packet = " ".join(block.as_binary() for block in blocks)
        summary += f"\nTransmit: {packet} [{COLORS['checksum']}]{result.checksum}[/{COLORS['checksum']}]"
    parts.append(Panel(summary, title="Result", border_style="green"))
    return Group(*parts)


def render_verification(
    sequence: Iterable[BlockLike],
    outcome: VerificationOutcome,
    notes: Sequence[str] = (),
) -> Panel:
    """Verification calculation with every received block labelled."""
    blocks = as_blocks(sequence)
    lines = [f"[dim]{note}[/dim]" for note in notes]
    last_index = len(blocks) - 1
    for index, block in enumerate(blocks):
        prefix = "  " if index == 0 else "+ "
        label = "(checksum)" if index == last_index else f"(block {index + 1})"
        lines.append(f"{prefix}{block.as_binary()} {label}")
    lines.append(f"= {outcome.received_sum}")
    lines.append("")
    status_style = COLORS["valid"] if outcome.is_valid else COLORS["invalid"]
    status = "MATCH" if outcome.is_valid else "MISMATCH"
    lines.append("Expected: 11111111 (all 1s for valid data)")
    lines.append(f"Received: {outcome.received_sum}")
    lines.append(f"Status: [{status_style}]{status}[/{status_style}]")
    lines.append(f"[{status_style}]{outcome.message}[/{status_style}]")
    return Panel("\n".join(lines), title="Verification", border_style="green" if outcome.is_valid else "red")


def ui_loop(state_queue: SingleSlotQueue[WalkthroughSnapshot]) -> None:
    """Loop the UI."""
    with Live(render(None), refresh_per_second=30, screen=False) as live:
        for state in state_queue:
            live.update(render(state))
