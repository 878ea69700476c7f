"""Per-owner histograms of vector max sizes."""

from ..models import HistogramBlock, HistogramRow


def format_percentage(numerator: int, denominator: int) -> str:
    """Percentage with one decimal place. A zero denominator gives "0.0%"."""
    if denominator == 0:
        return "0.0%"
    return f"{numerator / denominator * 100:.1f}%"


class VectorProfileView:
    """One histogram block per owner, in order of first observation."""

    def __init__(self):
        self._blocks: dict[str, HistogramBlock] = {}

    @property
    def blocks(self) -> list[HistogramBlock]:
        return list(self._blocks.values())

    def get(self, owner: str) -> HistogramBlock | None:
        return self._blocks.get(owner)

    def update_max_size_histogram(self, owner: str, count_by_size: list[int]) -> HistogramBlock:
        """Replace owner's rows with count_by_size. Bad input raises before anything changes."""
        if not isinstance(count_by_size, list):
            raise TypeError(f"counts for {owner!r} must be a list, not {type(count_by_size).__name__}")
        if not all(isinstance(count, int) and count >= 0 for count in count_by_size):
            raise ValueError(f"counts for {owner!r} must be non-negative integers")

        block = self._blocks.get(owner)
        if block is None:
            block = HistogramBlock(owner=owner)
            self._blocks[owner] = block

        block.total = sum(count_by_size)
        block.max = max(count_by_size, default=0)

        del block.rows[len(count_by_size):]
        for size, count in enumerate(count_by_size):
            if size == len(block.rows):
                block.rows.append(HistogramRow(size=size))
            row = block.rows[size]
            row.count = count
            row.label = format_percentage(count, block.total)
            row.scale = format_percentage(count, block.max)
        return block
