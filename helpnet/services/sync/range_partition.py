"""
Block range partitioning.
"""


def partition_range(from_block: int, to_block: int, max_span: int) -> list[tuple[int, int]]:
    """
    Split an inclusive block interval into consecutive bounded windows.

    Args:
        from_block: First block (inclusive)
        to_block: Last block (inclusive)
        max_span: Max number of blocks per window

    Returns:
        List of inclusive (from, to) pairs in increasing order; empty when
        from_block > to_block

    Examples:
        >>> partition_range(100, 1200, 500)
        [(100, 599), (600, 1099), (1100, 1200)]
    """
    if max_span <= 0:
        raise ValueError(f"max_span must be positive, got {max_span}")

    windows = []
    current = from_block
    while current <= to_block:
        end = min(current + max_span - 1, to_block)
        windows.append((current, end))
        current = end + 1
    return windows
