# analyze_runs.py
"""
Summarise the CSV written by ``ga_solver.py`` across independent runs.

*   groups rows by *(crossover rate, mutation rate, population, generation)*
*   averages best and average fitness over the runs of each group
*   saves the summary as CSV and prints the last generation of every
    parameter set

Usage:
    python analyze_runs.py output.csv [-o summary.csv]
"""

from __future__ import annotations

import argparse
from pathlib import Path

import pandas as pd

from ga_io import CSV_HEADER

PARAM_COLS = ["Cross-over Rate", "Mutation Rate", "Population"]


def load_dataframe(path: Path | str) -> pd.DataFrame:
    df = pd.read_csv(path)
    missing = [c for c in CSV_HEADER if c not in df.columns]
    if missing:
        raise ValueError(f"missing columns: {', '.join(missing)}")
    return df


def summarise(df: pd.DataFrame) -> pd.DataFrame:
    grouped = df.groupby(PARAM_COLS + ["Generation"], as_index=False)
    out = grouped.agg(
        runs=("Best Fitness", "size"),
        best_mean=("Best Fitness", "mean"),
        best_min=("Best Fitness", "min"),
        average_mean=("Average Fitness", "mean"),
    )
    return out.sort_values(PARAM_COLS + ["Generation"]).reset_index(drop=True)


def last_generation(summary: pd.DataFrame) -> pd.DataFrame:
    idx = summary.groupby(PARAM_COLS)["Generation"].idxmax()
    return summary.loc[idx].reset_index(drop=True)

# ---------------------------------------------------------------------------
# CLI
# ---------------------------------------------------------------------------

def main(argv=None) -> None:
    ap = argparse.ArgumentParser(description="Average GA generations across runs")
    ap.add_argument("csv", type=Path, help="CSV written by ga_solver.py")
    ap.add_argument("-o", "--output", type=Path, default="output_summary.csv",
                    help="destination CSV (default: %(default)s)")
    args = ap.parse_args(argv)

    try:
        df = load_dataframe(args.csv)
    except (OSError, ValueError, pd.errors.EmptyDataError) as err:
        raise SystemExit(f"Cannot read {args.csv}: {err}")
    if df.empty:
        raise SystemExit("No generation rows found – check the input file.")

    summary = summarise(df)
    summary.to_csv(args.output, index=False)
    print(f"Saved {args.output} – rows: {len(summary)}")

    print("\nLast generation per parameter set:")
    print(last_generation(summary).to_string(index=False))


if __name__ == "__main__":
    main()
