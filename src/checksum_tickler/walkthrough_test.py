from concurrent.futures import ThreadPoolExecutor

from rich.console import Console
from rich.panel import Panel

from checksum_tickler.algorithm.checksum import compute_checksum
from checksum_tickler.algorithm.verification import flip_bit, verify
from checksum_tickler.state_queue import SingleSlotQueue
from checksum_tickler.state_snapshot import WalkthroughSnapshot
from checksum_tickler.ui import render, render_trace, render_verification
from checksum_tickler.utils import SAMPLE_BLOCKS
from checksum_tickler.walkthrough import replay_calculation


def as_text(renderable) -> str:
    console = Console(record=True, width=120, color_system=None)
    console.print(renderable)
    return console.export_text()


class TestReplayCalculation:
    """Test suite for replaying a checksum trace"""

    def test_publishes_every_step(self):
        """Test one snapshot per step plus a final one, then the queue closes"""
        result = compute_checksum(SAMPLE_BLOCKS)
        queue: SingleSlotQueue[WalkthroughSnapshot] = SingleSlotQueue()

        published = replay_calculation(result, SAMPLE_BLOCKS, queue, delay=0)

        assert published == len(result.steps) + 1
        assert queue.closed
        final = queue.get(timeout=1)
        assert final.complete
        assert final.state_version == published
        assert final.visible_steps == result.steps
        assert final.checksum == "00001101"
        assert queue.get(timeout=1) is None

    def test_consumer_sees_increasing_versions(self):
        """Test a concurrent consumer ends on the complete snapshot"""
        result = compute_checksum(SAMPLE_BLOCKS)
        queue: SingleSlotQueue[WalkthroughSnapshot] = SingleSlotQueue()

        with ThreadPoolExecutor() as executor:
            future = executor.submit(replay_calculation, result, SAMPLE_BLOCKS, queue, delay=0.01)
            seen = list(queue)
            assert future.result() == len(result.steps) + 1

        versions = [snapshot.state_version for snapshot in seen]
        assert versions == sorted(versions)
        assert seen[-1].complete

    def test_stops_when_queue_closed(self):
        """Test an interrupted replay stops publishing"""
        result = compute_checksum(SAMPLE_BLOCKS)
        queue: SingleSlotQueue[WalkthroughSnapshot] = SingleSlotQueue()
        queue.close()
        assert replay_calculation(result, SAMPLE_BLOCKS, queue, delay=0) == 0


class TestSnapshot:
    """Test suite for WalkthroughSnapshot"""

    def test_visible_steps(self):
        """Test steps are revealed up to and including the current one"""
        result = compute_checksum(SAMPLE_BLOCKS)
        snapshot = WalkthroughSnapshot(
            state_version=2, complete=False, step_index=1, step_count=4,
            blocks=SAMPLE_BLOCKS, steps=result.steps, checksum=result.checksum,
        )
        assert snapshot.current_step == result.steps[1]
        assert snapshot.visible_steps == result.steps[:2]

    def test_no_current_step_out_of_range(self):
        """Test an empty snapshot has no current step"""
        snapshot = WalkthroughSnapshot(state_version=0, complete=False, step_index=0, step_count=0)
        assert snapshot.current_step is None


class TestRender:
    """Test suite for the rich rendering"""

    def test_render_waiting(self):
        """Test the placeholder before the first snapshot"""
        assert isinstance(render(None), Panel)

    def test_render_step(self):
        """Test a mid-replay snapshot shows the current step worked by hand"""
        result = compute_checksum(SAMPLE_BLOCKS)
        snapshot = WalkthroughSnapshot(
            state_version=3, complete=False, step_index=1, step_count=4,
            blocks=SAMPLE_BLOCKS, steps=result.steps, checksum=result.checksum,
        )
        text = as_text(render(snapshot))
        assert "Step 2 / 4" in text
        assert "+ 10101010" in text
        assert "carry 1 wrapped around" in text

    def test_render_complement_step(self):
        """Test the complement step is drawn with ~"""
        result = compute_checksum(SAMPLE_BLOCKS)
        snapshot = WalkthroughSnapshot(
            state_version=4, complete=False, step_index=3, step_count=4,
            blocks=SAMPLE_BLOCKS, steps=result.steps, checksum=result.checksum,
        )
        text = as_text(render(snapshot))
        assert "~ --------" in text
        assert "= 00001101" in text

    def test_render_complete(self):
        """Test the final snapshot shows the checksum and packet"""
        result = compute_checksum(SAMPLE_BLOCKS)
        snapshot = WalkthroughSnapshot(
            state_version=5, complete=True, step_index=3, step_count=4,
            blocks=SAMPLE_BLOCKS, steps=result.steps, checksum=result.checksum,
        )
        text = as_text(render(snapshot))
        assert "Checksum: 00001101" in text
        assert "Transmit: 11010011 10101010 01110100 00001101" in text

    def test_render_trace(self):
        """Test the static trace rendering"""
        text = as_text(render_trace(compute_checksum(SAMPLE_BLOCKS), SAMPLE_BLOCKS))
        assert "Checksum Calculation" in text
        assert "Sum: 11110010" in text
        assert "Checksum: 00001101 (13)" in text

    def test_render_verification_valid(self):
        """Test a valid verification lists every block"""
        sequence = SAMPLE_BLOCKS + (compute_checksum(SAMPLE_BLOCKS).checksum_block,)
        text = as_text(render_verification(sequence, verify(sequence)))
        assert "11010011 (block 1)" in text
        assert "+ 00001101 (checksum)" in text
        assert "Status: MATCH" in text

    def test_render_verification_invalid(self):
        """Test a corrupted verification shows the flip note and mismatch"""
        sequence = flip_bit(["11111111", "00000000"], 0, 0)
        note = "Simulated transmission error in block 1, bit 1"
        text = as_text(render_verification(sequence, verify(sequence), [note]))
        assert note in text
        assert "Received: 01111111" in text
        assert "Status: MISMATCH" in text
