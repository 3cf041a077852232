#!/usr/bin/python3
import os
import sys
import time
import gc
import argparse
from contextlib import contextmanager

import numpy as np
import pandas as pd
import matplotlib

matplotlib.use("Agg")
import matplotlib.pyplot as plt  # noqa E402

sys.path.append(os.path.join(os.path.dirname(os.path.realpath(__file__)), "..", "src"))
import ac_common as acc  # noqa E402
from AhoCorasick import AhoCorasick  # noqa E402
from NaiveSearch import naive_search  # noqa E402

# Configuration variables
CORPUS_LENGTHS = [10_000, 20_000, 50_000, 100_000, 200_000, 500_000]
PATTERN_COUNTS = [1, 10, 100, 1000]
ALPHABET = b"ACGT"
PATTERN_LEN = (4, 12)
REPEATS = 3

TITLE_FONT_SIZE = 16
AXIS_LABEL_FONT_SIZE = 14
MARKER_SIZE = 6


@contextmanager
def disable_gc():
    """Temporarily disable the garbage collector."""
    gc_enabled = gc.isenabled()
    gc.disable()
    try:
        yield
    finally:
        if gc_enabled:
            gc.enable()


def random_bytes(rng: np.random.Generator, length: int) -> bytes:
    alphabet = np.frombuffer(ALPHABET, dtype=np.uint8)
    return rng.choice(alphabet, size=length).tobytes()


def random_patterns(rng: np.random.Generator, count: int):
    lengths = rng.integers(PATTERN_LEN[0], PATTERN_LEN[1] + 1, size=count)
    return [random_bytes(rng, int(n)) for n in lengths]


def time_scan(matcher: AhoCorasick, corpus: bytes):
    best = None
    matches = 0
    for _ in range(REPEATS):
        with disable_gc():
            begin = time.perf_counter()
            matches = sum(1 for _ in matcher.scan(corpus))
            elapsed = time.perf_counter() - begin
        best = elapsed if best is None else min(best, elapsed)
    return best, matches


def run_benchmark(seed: int, with_naive: bool) -> pd.DataFrame:
    rng = np.random.default_rng(seed)
    rows = []
    for count in PATTERN_COUNTS:
        patterns = random_patterns(rng, count)
        matcher = AhoCorasick(patterns)
        for length in CORPUS_LENGTHS:
            corpus = random_bytes(rng, length)
            elapsed, matches = time_scan(matcher, corpus)
            row = {
                "patterns": count,
                "corpus_length": length,
                "matches": matches,
                "scan_sec": elapsed,
            }
            if with_naive and count == 1:
                begin = time.perf_counter()
                naive_search(corpus, patterns[0])
                row["naive_sec"] = time.perf_counter() - begin
            rows.append(row)
            print(f"patterns={count} length={length} matches={matches} {elapsed:.4f}s")
    return pd.DataFrame(rows)


def plot_scan_time(df: pd.DataFrame, output_filename: str):
    """
    One line per pattern count: scan time against corpus length.
    Straight lines mean the scan stays linear whatever the pattern count.
    """
    fig, ax = plt.subplots(figsize=(8, 6))
    for count, group in df.groupby("patterns"):
        group = group.sort_values("corpus_length")
        ax.plot(
            group["corpus_length"].to_numpy(),
            group["scan_sec"].to_numpy(),
            marker="o",
            markersize=MARKER_SIZE,
            label=f"{count} patterns",
        )
    ax.set_xlabel("Corpus length (symbols)", fontsize=AXIS_LABEL_FONT_SIZE)
    ax.set_ylabel("Scan time (sec)", fontsize=AXIS_LABEL_FONT_SIZE)
    ax.set_title("Aho-Corasick scan time", fontsize=TITLE_FONT_SIZE)
    ax.grid(True, linestyle="--", alpha=0.6)
    ax.legend()
    fig.tight_layout()
    plt.savefig(output_filename)
    plt.close(fig)
    print(f"Saved {output_filename}")


def main():
    parser = argparse.ArgumentParser(description="Benchmark the scan loop")
    parser.add_argument("-o", "--out-dir", default="bench", help="Output directory")
    parser.add_argument("-s", "--seed", type=int, default=0)
    parser.add_argument("--naive", action="store_true", help="Also time the naive search")
    parser.add_argument("-v", "--verbose", action="store_true")
    args = parser.parse_args()

    acc.setup_logging(enabled=args.verbose)
    os.makedirs(args.out_dir, exist_ok=True)

    df = run_benchmark(args.seed, args.naive)
    csv_path = os.path.join(args.out_dir, "scan_time.csv")
    df.to_csv(csv_path, index=False)
    print(f"Saved {csv_path}")
    plot_scan_time(df, os.path.join(args.out_dir, "scan_time.svg"))


if __name__ == "__main__":
    main()
