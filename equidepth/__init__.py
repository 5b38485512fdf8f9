from equidepth.estimators import HistogramEstimator, BinLookupError

__all__ = ["HistogramEstimator", "BinLookupError"]
