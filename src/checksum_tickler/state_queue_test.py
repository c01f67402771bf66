import threading

import pytest
from checksum_tickler.state_queue import SingleSlotQueue


class TestSingleSlotQueue:
    """Test suite for SingleSlotQueue"""

    def test_publish_get(self):
        """Test a published item can be read"""
        queue: SingleSlotQueue[int] = SingleSlotQueue()
        assert queue.publish(1)
        assert queue.get(timeout=1) == 1

    def test_latest_wins(self):
        """Test an unread item is overwritten by a newer one"""
        queue: SingleSlotQueue[int] = SingleSlotQueue()
        queue.publish(1)
        queue.publish(2)
        assert queue.get(timeout=1) == 2

    def test_get_timeout(self):
        """Test get raises when nothing arrives in time"""
        queue: SingleSlotQueue[int] = SingleSlotQueue()
        with pytest.raises(TimeoutError):
            queue.get(timeout=0.01)

    def test_close_drains_last_item(self):
        """Test the last item is still readable after close, then None"""
        queue: SingleSlotQueue[int] = SingleSlotQueue()
        queue.publish(3)
        queue.close()
        assert queue.closed
        assert queue.get(timeout=1) == 3
        assert queue.get(timeout=1) is None

    def test_publish_after_close(self):
        """Test publishing to a closed queue is refused"""
        queue: SingleSlotQueue[int] = SingleSlotQueue()
        queue.close()
        assert not queue.publish(1)
        assert queue.get(timeout=1) is None

    def test_iteration_stops_on_close(self):
        """Test iterating yields items until the queue closes"""
        queue: SingleSlotQueue[int] = SingleSlotQueue()
        received = []

        def consume():
            for item in queue:
                received.append(item)

        consumer = threading.Thread(target=consume)
        consumer.start()
        queue.publish(1)
        queue.close()
        consumer.join(timeout=5)

        assert not consumer.is_alive()
        assert received == [1]
