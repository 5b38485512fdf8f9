import numpy as np


class StreamingStat:
    """Running moments of a sample stream with O(1) memory."""

    def __init__(self):
        self.count = 0
        self.sum = 0.0
        self.sum_sq = 0.0
        self.min_val = float('inf')
        self.max_val = float('-inf')

    def add(self, x: float):
        self.count += 1
        self.sum += x
        self.sum_sq += x * x
        self.min_val = min(self.min_val, x)
        self.max_val = max(self.max_val, x)

    def mean(self):
        return self.sum / self.count if self.count else 0.0

    def std(self):
        if self.count < 2:
            return 0.0
        mean_sq = self.sum * self.sum / self.count
        # rounding can push the numerator slightly below zero for constant streams
        return float(np.sqrt(max(self.sum_sq - mean_sq, 0.0) / (self.count - 1)))

    def summary(self):
        return {
            'count': self.count,
            'mean': self.mean(),
            'std': self.std(),
            'min': self.min_val if self.count else None,
            'max': self.max_val if self.count else None,
        }
