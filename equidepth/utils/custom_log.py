import logging

logger = logging.getLogger(__name__)


def format_histogram(estimator) -> list:
    return [
        f"Bin {i + 1}: {lower:.2f} - {upper:.2f} | Count: {count}"
        for i, (lower, upper, count) in enumerate(estimator.bins())
    ]


class HistogramStateLogger:
    """
    Writes the estimator state after an insertion to the log, and to stdout when echo is set.
    """

    def __init__(self, echo: bool = False, level: int = logging.DEBUG) -> None:
        self.echo = echo
        self.level = level

    def log_state(self, step: int, estimator):
        lines = format_histogram(estimator)
        header = f"[HIST] step={step} total={estimator.total_count} bins={estimator.max_bins}"
        logger.log(self.level, "%s\n%s", header, "\n".join(lines))

        if self.echo:
            print("Current histogram state:")
            for line in lines:
                print(line)
            print()
        return lines
