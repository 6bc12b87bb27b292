import pytest

from ranacore.index_queue import IndexQueue, IndexQueueExhausted


def test_capture_hands_out_each_index_once():
    queue = IndexQueue(10, 12)
    captured = [queue.capture() for _ in range(3)]
    assert sorted(captured) == [10, 11, 12]
    with pytest.raises(IndexQueueExhausted):
        queue.capture()


def test_capture_starts_at_minimum():
    queue = IndexQueue(5, 9)
    assert queue.capture() == 5
    assert queue.capture() == 6


def test_released_index_is_reused():
    queue = IndexQueue(10, 12)
    for _ in range(3):
        queue.capture()
    queue.release(11)
    assert queue.is_captured(11) is False
    assert queue.capture() == 11
    assert queue.is_captured(11) is True


def test_capture_index_refuses_taken_index():
    queue = IndexQueue(0, 4)
    assert queue.capture_index(3) is True
    assert queue.capture_index(3) is False
    assert queue.is_captured(3) is True


def test_capture_skips_specifically_captured_index():
    queue = IndexQueue(0, 2)
    queue.capture_index(0)
    assert queue.capture() == 1


def test_capture_index_out_of_range_raises():
    queue = IndexQueue(10, 12)
    with pytest.raises(ValueError):
        queue.capture_index(13)
    with pytest.raises(ValueError):
        queue.capture_index(9)


def test_is_captured_out_of_range_is_false():
    queue = IndexQueue(10, 12)
    queue.capture()
    assert queue.is_captured(100) is False
    assert queue.is_captured(0) is False


def test_release_out_of_range_is_ignored():
    queue = IndexQueue(1, 2)
    queue.capture()
    queue.capture()
    queue.release(50)
    with pytest.raises(IndexQueueExhausted):
        queue.capture()


def test_release_all_frees_everything():
    queue = IndexQueue(0, 3)
    for _ in range(4):
        queue.capture()
    queue.release_all()
    assert not any(queue.is_captured(i) for i in range(4))
    assert sorted(queue.capture() for _ in range(4)) == [0, 1, 2, 3]


@pytest.mark.parametrize("minimum, maximum", [(5, 3), (5, 4), (-1, 3)])
def test_invalid_range_raises(minimum, maximum):
    with pytest.raises(ValueError):
        IndexQueue(minimum, maximum)


def test_single_slot_queue():
    queue = IndexQueue(7, 7)
    assert queue.capture() == 7
    with pytest.raises(IndexQueueExhausted):
        queue.capture()
    queue.release(7)
    assert queue.capture() == 7