import os
import numpy as np
import pandas as pd
import matplotlib.pyplot as plt


def snapshot_record(step: int, sample: float, estimator) -> dict:
    record = {"step": step, "sample": sample, "total_count": estimator.total_count}
    for i, count in enumerate(estimator.counts):
        record[f"count_{i}"] = int(count)
    for i, edge in enumerate(estimator.boundaries):
        record[f"edge_{i}"] = float(edge)
    return record


def save_snapshots(records, path: str) -> str:
    df = pd.DataFrame(records)
    df.to_csv(path, index=False)
    return path


def plot_histogram(estimator, path: str, title: str = None):
    edges = np.asarray(estimator.boundaries, dtype=float)
    counts = np.asarray(estimator.counts, dtype=float)
    widths = np.diff(edges)

    fig, ax = plt.subplots(figsize=(10, 5))
    ax.bar(edges[:-1], counts, width=widths, align='edge', edgecolor='black', color='tab:blue')
    ax.set_xlabel("Value")
    ax.set_ylabel("Count")
    ax.set_title(title or f"Equi-depth histogram ({estimator.max_bins} bins, {estimator.total_count} samples)")
    ax.grid(True)
    plt.tight_layout()
    fig.savefig(path)
    plt.close(fig)
    return path


def plot_bin_counts(data_path: str, path: str):
    data = pd.read_csv(data_path)
    count_columns = [c for c in data.columns if c.startswith("count_")]

    fig, ax = plt.subplots(figsize=(10, 5))
    for column in count_columns:
        bin_no = int(column.split("_")[1]) + 1
        ax.plot(data["step"], data[column], label=f"Bin {bin_no}")
    ax.set_xlabel("Step")
    ax.set_ylabel("Count")
    ax.set_title("Bin counts over the stream")
    if count_columns:
        ax.legend()
    ax.grid(True)
    plt.tight_layout()
    fig.savefig(path)
    plt.close(fig)
    return path


def report_paths(log_dir: str) -> dict:
    return {
        "snapshots": os.path.join(log_dir, "snapshots.csv"),
        "histogram": os.path.join(log_dir, "histogram.png"),
        "bin_counts": os.path.join(log_dir, "bin_counts.png"),
    }
