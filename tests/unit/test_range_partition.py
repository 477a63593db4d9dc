"""Unit tests for block range partitioning."""

import pytest

from helpnet.services.sync.range_partition import partition_range


class TestPartitionRange:
    """Tests for partition_range."""

    def test_splits_into_bounded_windows(self):
        """[100, 1200] with span 500 gives three windows, last one short."""
        assert partition_range(100, 1200, 500) == [
            (100, 599),
            (600, 1099),
            (1100, 1200),
        ]

    def test_single_block(self):
        """A one-block interval is one window."""
        assert partition_range(42, 42, 500) == [(42, 42)]

    def test_exact_multiple(self):
        """Interval length equal to a multiple of the span has no remainder."""
        assert partition_range(0, 999, 500) == [(0, 499), (500, 999)]

    def test_empty_when_from_after_to(self):
        """from > to yields no windows."""
        assert partition_range(1201, 1200, 500) == []

    def test_windows_are_contiguous(self):
        """Windows cover the interval with no gap and no overlap."""
        windows = partition_range(7, 10_000, 333)

        assert windows[0][0] == 7
        assert windows[-1][1] == 10_000
        for (_, prev_to), (next_from, _) in zip(windows, windows[1:]):
            assert next_from == prev_to + 1
        assert all(to - frm + 1 <= 333 for frm, to in windows)

    @pytest.mark.parametrize("span", [0, -1])
    def test_non_positive_span_rejected(self, span):
        """Span must be positive."""
        with pytest.raises(ValueError):
            partition_range(0, 10, span)
