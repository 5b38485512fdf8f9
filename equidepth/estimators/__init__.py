from equidepth.estimators.equidepth import HistogramEstimator, BinLookupError, midpoint_search
