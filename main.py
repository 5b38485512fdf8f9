import os
import json
import logging
import argparse

import numpy as np

from equidepth import HistogramEstimator
from equidepth.utils.sample_gen import DISTRIBUTIONS, build_sample_generator
from equidepth.utils.streaming_stats import StreamingStat
from equidepth.utils.custom_log import HistogramStateLogger, format_histogram
from equidepth.utils.plot_fig import (snapshot_record, save_snapshots, plot_histogram,
                                      plot_bin_counts, report_paths)

logger = logging.getLogger(__name__)


def setup_logging(log_config_path: str = "log_config.json") -> str:
    log_config = {}
    if os.path.exists(log_config_path):
        with open(log_config_path, 'r') as f:
            log_config = json.load(f)

    log_prefix = log_config.get("log_prefix", "default")
    log_level = getattr(logging, log_config.get("log_level", "INFO").upper(), logging.INFO)
    log_dir = f"logs/{log_prefix}/"
    os.makedirs(log_dir, exist_ok=True)
    logging.basicConfig(
        level=log_level,
        format='[PID: %(process)d] [%(levelname)s] %(message)s',
        handlers=[
            logging.FileHandler(f"{log_dir}/equidepth.log", mode='a')
        ],
        force=True
    )
    return log_dir


def load_config(config_path: str, dist: str) -> dict:
    with open(config_path, 'r') as f:
        config_all = json.load(f)

    config = dict(config_all.get("general", {}))
    config["params"] = dict(config_all.get(dist, {}))
    return config


def apply_overrides(config: dict, args) -> dict:
    for key in ("max_bins", "num_samples", "seed", "print_every"):
        value = getattr(args, key, None)
        if value is not None:
            config[key] = value
    return config


def run_stream(dist: str, config: dict, echo: bool = False, record: bool = False):
    """
    Feeds num_samples generated values into a fresh estimator, logging the histogram every
    print_every insertions. Returns the estimator, the stream summary and the per-step records.
    """
    max_bins = config.get("max_bins", 10)
    num_samples = config.get("num_samples", 1000)
    print_every = config.get("print_every", 1)
    rng = np.random.default_rng(config.get("seed"))

    estimator = HistogramEstimator(max_bins)
    stats = StreamingStat()
    state_logger = HistogramStateLogger(echo=echo)
    records = []

    logger.info(f"Streaming {num_samples} {dist} samples into {max_bins} bins")
    samples = build_sample_generator(dist, config.get("params", {}), num_samples, rng)
    for step, sample in enumerate(samples, start=1):
        estimator.add(sample)
        stats.add(sample)
        if print_every and step % print_every == 0:
            state_logger.log_state(step, estimator)
        if record:
            records.append(snapshot_record(step, sample, estimator))

    return estimator, stats, records


def main(args):
    log_dir = setup_logging(args.log_config)
    config = apply_overrides(load_config(args.config, args.dist), args)

    estimator, stats, records = run_stream(args.dist, config, echo=args.echo, record=args.save_csv)

    summary = stats.summary()
    logger.info(f"Stream summary: {summary}")
    logger.info("Final histogram:\n" + "\n".join(format_histogram(estimator)))

    paths = report_paths(log_dir)
    if args.save_csv:
        save_snapshots(records, paths["snapshots"])
        if args.plot:
            plot_bin_counts(paths["snapshots"], paths["bin_counts"])
    if args.plot:
        plot_histogram(estimator, paths["histogram"])

    if summary["count"]:
        print(f"Processed {summary['count']} samples "
              f"(min={summary['min']:.2f}, max={summary['max']:.2f}, mean={summary['mean']:.2f})")
    for line in format_histogram(estimator):
        print(line)


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Stream generated samples into an equi-depth histogram")
    parser.add_argument(
        "--dist",
        type=str,
        choices=DISTRIBUTIONS,
        default="exponential",
        help="Choose one of: " + ", ".join(DISTRIBUTIONS)
    )

    parser.add_argument("--max-bins", type=int, default=None, help="Number of histogram bins")
    parser.add_argument("--num-samples", type=int, default=None, help="Number of samples to stream")
    parser.add_argument("--seed", type=int, default=None, help="Seed for the sample generator")
    parser.add_argument("--print-every", type=int, default=None, help="Log the histogram every N insertions (0 disables)")
    parser.add_argument("--echo", action="store_true", help="Also print the histogram state to stdout")
    parser.add_argument("--save-csv", action="store_true", help="Save per-step snapshots to CSV")
    parser.add_argument("--plot", action="store_true", help="Save histogram plots to the log directory")
    parser.add_argument("--config", type=str, default="config.json", help="Path to the run configuration")
    parser.add_argument("--log-config", type=str, default="log_config.json", help="Path to the logging configuration")

    args = parser.parse_args()
    main(args)
