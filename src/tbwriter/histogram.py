from __future__ import annotations

import operator
from dataclasses import dataclass, field
from typing import Any

import numpy as np

from tbwriter.proto import HistogramProto


class HistogramError(ValueError):
    pass


@dataclass(frozen=True)
class Histogram:
    """
    Linear histogram over [min, max].

    `bucket_limits[i]` is the inclusive right edge of bucket i and
    `bucket_counts[i]` the number of samples in it.
    """

    min: float = 0.0
    max: float = 0.0
    bucket_limits: list[float] = field(default_factory=list)
    bucket_counts: list[float] = field(default_factory=list)
    num: float = 0.0
    sum: float = 0.0
    sum_squares: float = 0.0

    @property
    def is_empty(self) -> bool:
        return not self.bucket_counts

    def to_proto(self) -> Any:
        return HistogramProto(
            min=self.min,
            max=self.max,
            num=self.num,
            sum=self.sum,
            sum_squares=self.sum_squares,
            bucket_limit=self.bucket_limits,
            bucket=self.bucket_counts,
        )


def _as_samples(values: Any) -> np.ndarray:
    try:
        arr = np.asarray(values, dtype=np.float64)
    except (TypeError, ValueError) as e:
        raise HistogramError(f"Histogram values must be real numbers: {e}") from e
    return arr.reshape(-1)


def _sum_squares(z: np.ndarray) -> float:
    with np.errstate(over="ignore"):
        return float(np.dot(z, z))


def bucketize(values: Any, bins: int) -> Histogram:
    try:
        bins = operator.index(bins)
    except TypeError as e:
        raise HistogramError(f"bins must be an integer, got {bins!r}") from e
    if bins < 0:
        raise HistogramError(f"bins must be >= 0, got {bins}")
    z = _as_samples(values)
    if z.size == 0 or bins == 0:
        return Histogram()
    if not np.all(np.isfinite(z)):
        raise HistogramError("Histogram values must be finite (got NaN or inf).")

    lo = float(z.min())
    hi = float(z.max())
    bucket_width = (hi - lo) / bins
    limits = [lo + (i + 1) * bucket_width for i in range(bins)]

    if bucket_width > 0:
        with np.errstate(over="ignore", invalid="ignore"):
            idx = np.floor((z - lo) / bucket_width)
        # A range wider than the float max makes (z - lo) / width NaN; those go to bucket 0.
        idx = np.nan_to_num(idx, nan=0.0)
    else:
        idx = np.zeros_like(z)
    # Clamp: the max lands one past the last edge, and rounding can push others out too.
    idx = np.clip(idx, 0, bins - 1).astype(np.int64)
    counts = np.bincount(idx, minlength=bins).astype(np.float64, copy=False)

    return Histogram(
        min=lo,
        max=hi,
        bucket_limits=limits,
        bucket_counts=counts.tolist(),
        num=float(z.size),
        sum=float(z.sum()),
        sum_squares=_sum_squares(z),
    )
