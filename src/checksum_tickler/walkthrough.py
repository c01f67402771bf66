import time
from typing import Iterable

import structlog

from checksum_tickler.models.block import BlockLike, as_blocks
from checksum_tickler.models.results import ChecksumResult
from checksum_tickler.state_queue import SingleSlotQueue
from checksum_tickler.state_snapshot import WalkthroughSnapshot

log = structlog.get_logger()

DEFAULT_DELAY = 0.6


def replay_calculation(
    result: ChecksumResult,
    blocks: Iterable[BlockLike],
    state_queue: SingleSlotQueue[WalkthroughSnapshot],
    *,
    delay: float = DEFAULT_DELAY,
) -> int:
    """
    Publish the steps of a computed checksum one at a time so a UI can animate them.
    - delay: seconds to hold each step before moving to the next
    Returns the number of snapshots published.
    """
    blocks = as_blocks(blocks)
    step_count = len(result.steps)
    state_version = 0

    try:
        for step_index in range(step_count):
            state_version += 1
            snapshot = WalkthroughSnapshot(
                state_version=state_version,
                complete=False,
                step_index=step_index,
                step_count=step_count,
                blocks=blocks,
                steps=result.steps,
                checksum=result.checksum,
            )
            if not state_queue.publish(snapshot):
                log.debug("walkthrough interrupted", step_index=step_index)
                return state_version - 1
            if delay:
                time.sleep(delay)

        # Final state snapshot.
        state_version += 1
        snapshot = WalkthroughSnapshot(
            state_version=state_version,
            complete=True,
            step_index=step_count - 1,
            step_count=step_count,
            blocks=blocks,
            steps=result.steps,
            checksum=result.checksum,
        )
        state_queue.publish(snapshot)
        return state_version
    except Exception:
        log.exception("walkthrough failed", state_version=state_version)
        raise
    finally:
        # Always close the queue so the UI can exit
        state_queue.close()
