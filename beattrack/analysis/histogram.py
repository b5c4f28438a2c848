"""Global tempo histogram accumulated from per-frame periodicity peaks."""

from __future__ import annotations

import numpy as np

from beattrack.analysis.dsp import extract_peaks


class Histogram:
    """Vote counts of periodicity-peak lags in fixed-width bins.

    Besides the counts, each bin keeps the sum of the lags that voted into
    it, so a bin can report the mean beat length it stands for. Votes are
    never removed; queries are only meaningful once every frame has voted.
    """

    def __init__(self, num_bins: int, bin_size: int):
        self.num_bins = num_bins
        self.bin_size = bin_size
        self.counts = np.zeros(num_bins, dtype=np.int64)
        self._lag_sums = np.zeros(num_bins, dtype=np.int64)

    def bin_of(self, lag: int) -> int:
        return min(lag // self.bin_size, self.num_bins - 1)

    def vote(self, bin_index: int) -> None:
        """Add one vote to a bin, standing for the bin's center lag."""
        self.counts[bin_index] += 1
        self._lag_sums[bin_index] += bin_index * self.bin_size + self.bin_size // 2

    def vote_lag(self, lag: int) -> None:
        """Add one vote for a periodicity peak found at *lag*."""
        b = self.bin_of(lag)
        self.counts[b] += 1
        self._lag_sums[b] += lag

    def merge(self, other: "Histogram") -> None:
        """Add the votes of a histogram with the same binning."""
        if (other.num_bins, other.bin_size) != (self.num_bins, self.bin_size):
            raise ValueError("cannot merge histograms with different binning")
        self.counts += other.counts
        self._lag_sums += other._lag_sums

    @property
    def total_votes(self) -> int:
        return int(self.counts.sum())

    def dominant_bin(self) -> int | None:
        """Bin with the most votes (lowest index on ties), None without votes."""
        if self.total_votes == 0:
            return None
        return int(np.argmax(self.counts))

    def peaks(self, persistence: float) -> list[int]:
        """Bins that stand out as separate tempo hypotheses."""
        return extract_peaks(self.counts, persistence)

    def bin_length(self, bin_index: int) -> float:
        """Mean lag voted into a bin (the bin center if it has no votes)."""
        n = self.counts[bin_index]
        if n == 0:
            return (bin_index + 0.5) * self.bin_size
        return float(self._lag_sums[bin_index]) / float(n)

    def dominant_length(self) -> float | None:
        """Beat length, in envelope samples, of the dominant bin."""
        b = self.dominant_bin()
        if b is None:
            return None
        return self.bin_length(b)
