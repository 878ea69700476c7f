"""Vector profile histogram data models."""

from dataclasses import dataclass, field


@dataclass
class HistogramRow:
    """One size bucket of an owner's histogram."""

    size: int
    count: int = 0
    label: str = ""  # percentage of total, e.g. "70.0%"
    scale: str = ""  # percentage of the largest bucket, e.g. "100.0%"


@dataclass
class HistogramBlock:
    """Rendered histogram of one owner. Created once per owner and updated in place."""

    owner: str
    rows: list[HistogramRow] = field(default_factory=list)
    total: int = 0
    max: int = 0
