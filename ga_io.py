"""Data file reader, CSV sink and console prompts for the key GA."""

import csv
import pathlib
import sys

CSV_HEADER = [
    "Generation",
    "Best Fitness",
    "Average Fitness",
    "Cross-over Rate",
    "Mutation Rate",
    "Population",
]


class DataFileError(ValueError):
    pass


def read_data_file(path):
    """Return ``(key_length, ciphertext)`` from a data file.

    Line 1 holds the key length; every following line is stripped and
    concatenated (no separator) into the ciphertext.
    """
    path = pathlib.Path(path).expanduser()
    try:
        lines = path.read_text(encoding="utf8").splitlines()
    except OSError as err:
        raise DataFileError(f"Error reading the file: {path} ({err})") from err

    if not lines:
        raise DataFileError(f"Invalid key length in the file: {path}")
    try:
        key_length = int(lines[0].strip())
    except ValueError:
        raise DataFileError(f"Invalid key length in the file: {path}") from None
    if key_length <= 0:
        raise DataFileError(f"Invalid key length in the file: {path}")

    ciphertext = "".join(line.strip() for line in lines[1:])
    if not ciphertext:
        raise DataFileError(f"Invalid encrypted text in the file: {path}")
    return key_length, ciphertext


def record_row(rec):
    return [
        rec.generation,
        rec.best_fitness,
        rec.average_fitness,
        rec.crossover_rate,
        rec.mutation_rate,
        rec.population_size,
    ]


def append_records(records, path):
    """Append generation records; header only if the file is missing or empty."""
    path = pathlib.Path(path).expanduser()
    try:
        write_header = not path.exists() or path.stat().st_size == 0
        if path.parent != pathlib.Path("."):
            path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("a", newline="") as f:
            writer = csv.writer(f, lineterminator="\n")
            if write_header:
                writer.writerow(CSV_HEADER)
            for rec in records:
                writer.writerow(record_row(rec))
    except OSError as err:
        print(f"Error writing data to CSV: {err}", file=sys.stderr)
        raise


def prompt_number(prompt, cast=float, input_fn=None):
    """Ask on the console until the answer parses."""
    while True:
        try:
            raw = (input_fn or input)(prompt)
        except EOFError:
            raise SystemExit(f"No input for: {prompt.strip()}") from None
        try:
            return cast(raw.strip())
        except ValueError:
            print(f"Not a valid number: {raw!r}", file=sys.stderr)


def percent_to_rate(pct):
    if not 0 <= pct <= 100:
        raise ValueError(f"rate must be between 0 and 100, got {pct}")
    return pct / 100.0
