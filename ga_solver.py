#!/usr/bin/env python3
"""Vigenère key search – Genetic Algorithm

Evolves a population of repeating keys for a ciphertext read from a data
file and appends per-generation statistics to a CSV file.

Key features
------------
* **Frequency-biased initial population** (letters drawn with the
  ciphertext's own letter distribution).
* **Tournament selection** with a size drawn once per process in [2, 5].
* **One-point** and **uniform crossover** (``--crossover-mode``; the
  default ``legacy`` mode runs uniform then one-point on the same parents,
  so only the one-point children survive).
* **Scramble mutation** of a random contiguous slice.
* Fully generational replacement, no elitism.
* Several independent runs, one seed each, appended to the same CSV.

Quick start
-----------
```bash
python ga_solver.py --data data.txt --crossover 90 --mutation 10 \
                    --pop 100 --gens 200 --seed 42 --log output.csv
```
Any of rates / population / generations left out is asked on the console.
"""

import argparse
import multiprocessing as mp
import random
import string
import sys
import time
from dataclasses import dataclass
from functools import partial
from typing import List, Optional, Tuple

from tqdm import tqdm

from ga_fitness import ORACLES, WORST_FITNESS, evaluate_population, make_oracle
from ga_io import DataFileError, append_records, percent_to_rate, prompt_number, read_data_file
from vigenere_cipher import decrypt

# ------------------------------------------------------------------
# 0. Defaults
# ------------------------------------------------------------------
DEFAULT_DATA = "data.txt"
DEFAULT_LOG = "output.csv"
DEFAULT_RUNS = 5
TOURNAMENT_RANGE = (2, 5)
FITNESS_THRESHOLD = 0.001
CROSSOVER_MODES = ("legacy", "one_point", "uniform")

LETTERS = string.ascii_lowercase

# ------------------------------------------------------------------
# 1. Data model
# ------------------------------------------------------------------


@dataclass(frozen=True)
class RunConfiguration:
    crossover_rate: float
    mutation_rate: float
    tournament_size: int
    population_size: int
    chromosome_length: int
    max_generations: int
    ciphertext: str
    crossover_mode: str = "legacy"
    patience: Optional[int] = None

    def __post_init__(self):
        if not 0.0 <= self.crossover_rate <= 1.0:
            raise ValueError(f"crossover rate must be in [0, 1], got {self.crossover_rate}")
        if not 0.0 <= self.mutation_rate <= 1.0:
            raise ValueError(f"mutation rate must be in [0, 1], got {self.mutation_rate}")
        if self.tournament_size < 1:
            raise ValueError("tournament size must be at least 1")
        if self.population_size <= 0 or self.population_size % 2:
            raise ValueError(f"population size must be a positive even number, got {self.population_size}")
        if self.chromosome_length < 1:
            raise ValueError("chromosome length must be at least 1")
        if self.max_generations < 1:
            raise ValueError("max generations must be at least 1")
        if not sum(letter_frequencies(self.ciphertext)):
            raise ValueError("ciphertext must contain at least one letter a-z")
        if self.crossover_mode not in CROSSOVER_MODES:
            raise ValueError(f"unknown crossover mode: {self.crossover_mode}")
        if self.patience is not None and self.patience < 1:
            raise ValueError("patience must be at least 1")


@dataclass(frozen=True)
class GenerationRecord:
    generation: int
    best_fitness: float
    average_fitness: float
    crossover_rate: float
    mutation_rate: float
    population_size: int


@dataclass(frozen=True)
class RunResult:
    seed: int
    records: Tuple[GenerationRecord, ...]
    best_key: str
    best_fitness: float
    plaintext: str


# ------------------------------------------------------------------
# 2. Initial population
# ------------------------------------------------------------------

def letter_frequencies(text: str) -> List[int]:
    freqs = [0] * 26
    for ch in text.lower():
        if ch in LETTERS:
            freqs[ord(ch) - ord("a")] += 1
    return freqs


def weighted_letter(freqs: List[int], total: int, rng: random.Random) -> str:
    r = rng.randrange(total) + 1
    cumulative = 0
    for i, f in enumerate(freqs):
        cumulative += f
        if r <= cumulative:
            return LETTERS[i]
    return "a"


def initialize_population(config: RunConfiguration, rng: random.Random) -> List[List[str]]:
    """Population whose letters follow the ciphertext's letter distribution."""
    freqs = letter_frequencies(config.ciphertext)
    total = sum(freqs)
    if total == 0:
        raise ValueError("ciphertext has no letters to sample from")
    return [
        [weighted_letter(freqs, total, rng) for _ in range(config.chromosome_length)]
        for _ in range(config.population_size)
    ]


# ------------------------------------------------------------------
# 3. GA primitives
# ------------------------------------------------------------------

def select_parent(pop, scores, k, rng):
    """Tournament of k draws with replacement; returns a copy of the winner."""
    if k < 1:
        raise ValueError("tournament size must be at least 1")
    best = rng.randrange(len(pop))
    for _ in range(k - 1):
        cand = rng.randrange(len(pop))
        if scores[cand] < scores[best]:
            best = cand
    return list(pop[best])


def one_point_crossover(p1, p2, rng):
    cut = rng.randrange(len(p1))
    return p1[:cut] + p2[cut:], p2[:cut] + p1[cut:]


def uniform_crossover(p1, p2, rng):
    c1, c2 = [], []
    for a, b in zip(p1, p2):
        if rng.random() < 0.5:
            c1.append(a)
            c2.append(b)
        else:
            c1.append(b)
            c2.append(a)
    return c1, c2


def crossover(p1, p2, mode, rng):
    if mode == "legacy":
        uniform_crossover(p1, p2, rng)  # result overwritten below
        return one_point_crossover(p1, p2, rng)
    if mode == "one_point":
        return one_point_crossover(p1, p2, rng)
    if mode == "uniform":
        return uniform_crossover(p1, p2, rng)
    raise ValueError(f"unknown crossover mode: {mode}")


def scramble_mutation(g, rng):
    """Shuffle g[start..end] (inclusive) in place."""
    start = rng.randrange(len(g))
    end = rng.randrange(start, len(g))
    subset = g[start:end + 1]
    for i in range(len(subset)):
        j = rng.randrange(len(subset))
        subset[i], subset[j] = subset[j], subset[i]
    g[start:end + 1] = subset
    return g


def mutate_children(c1, c2, rate, rng):
    if rng.random() < rate:
        scramble_mutation(c1, rng)
    if rng.random() < rate:
        scramble_mutation(c2, rng)


def best_index(scores) -> int:
    best = 0
    for i in range(1, len(scores)):
        if scores[i] < scores[best]:
            best = i
    return best


# ------------------------------------------------------------------
# 4. Generation & run drivers
# ------------------------------------------------------------------

def run_generation(pop, scores, config: RunConfiguration, rng, oracle):
    """Breed a full replacement population.

    Returns ``(new_pop, new_scores, best, average)``.
    """
    new_pop, new_scores = [], []
    for _ in range(0, config.population_size, 2):
        p1 = select_parent(pop, scores, config.tournament_size, rng)
        p2 = select_parent(pop, scores, config.tournament_size, rng)
        c1, c2 = list(p1), list(p2)
        if rng.random() < config.crossover_rate:
            c1, c2 = crossover(p1, p2, config.crossover_mode, rng)
        mutate_children(c1, c2, config.mutation_rate, rng)
        new_pop += [c1, c2]
        new_scores.append(oracle("".join(c1), config.ciphertext))
        new_scores.append(oracle("".join(c2), config.ciphertext))

    best = min(new_scores)
    # sentinel scores overflow the sum to inf; report the sentinel instead
    average = min(sum(new_scores) / len(new_scores), WORST_FITNESS)
    return new_pop, new_scores, best, average


def run_ga(config: RunConfiguration, seed, oracle=None, progress=None) -> RunResult:
    oracle = oracle or make_oracle()
    rng = random.Random(seed)

    pop = initialize_population(config, rng)
    scores = evaluate_population(pop, config.ciphertext, oracle)
    i = best_index(scores)
    best_key, best_key_score = "".join(pop[i]), scores[i]

    best_fitness = WORST_FITNESS
    stale = 0
    records = []
    for gen in range(1, config.max_generations + 1):
        pop, scores, gen_best, gen_avg = run_generation(pop, scores, config, rng, oracle)

        if best_fitness - gen_best > FITNESS_THRESHOLD:
            best_fitness = gen_best
            stale = 0
        else:
            stale += 1

        i = best_index(scores)
        if scores[i] < best_key_score:
            best_key, best_key_score = "".join(pop[i]), scores[i]

        rec = GenerationRecord(
            generation=gen,
            best_fitness=gen_best,
            average_fitness=gen_avg,
            crossover_rate=config.crossover_rate,
            mutation_rate=config.mutation_rate,
            population_size=config.population_size,
        )
        records.append(rec)
        if progress is not None:
            progress(rec)

        if config.patience is not None and stale >= config.patience:
            break

    return RunResult(
        seed=seed,
        records=tuple(records),
        best_key=best_key,
        best_fitness=best_key_score,
        plaintext=decrypt(config.ciphertext, best_key),
    )


def _run_worker(seed, config, oracle):
    return run_ga(config, seed, oracle)


def run_many(config: RunConfiguration, seeds, oracle=None, workers: int = 1):
    """Yield one RunResult per seed, in seed order."""
    oracle = oracle or make_oracle()
    seeds = list(seeds)
    if workers <= 1:
        for seed in seeds:
            yield run_ga(config, seed, oracle)
        return
    ctx = mp.get_context("spawn")
    work = partial(_run_worker, config=config, oracle=oracle)
    with ctx.Pool(min(workers, len(seeds))) as pool:
        for result in pool.imap(work, seeds):
            yield result


# ------------------------------------------------------------------
# 5. CLI
# ------------------------------------------------------------------

def build_parser():
    ap = argparse.ArgumentParser(description="Genetic algorithm search for a Vigenère key")
    ap.add_argument("--data", default=DEFAULT_DATA, help="Key length + ciphertext file (default: %(default)s)")
    ap.add_argument("--log", default=DEFAULT_LOG, help="CSV file the generations are appended to (default: %(default)s)")
    ap.add_argument("--crossover", type=float, help="Crossover rate in percent (0-100)")
    ap.add_argument("--mutation", type=float, help="Mutation rate in percent (0-100)")
    ap.add_argument("--pop", type=int, help="Population size (even)")
    ap.add_argument("--gens", type=int, help="Maximum number of generations")
    ap.add_argument("--runs", type=int, default=DEFAULT_RUNS, help="Independent runs (default: %(default)s)")
    ap.add_argument("--seed", type=int, default=None, help="Base seed; run i uses seed + i")
    ap.add_argument("--tournament", type=int, default=None, help="Tournament size (default: random in [2, 5])")
    ap.add_argument("--crossover-mode", choices=CROSSOVER_MODES, default="legacy")
    ap.add_argument("--patience", type=int, default=None,
                    help="Stop a run after N generations without improvement")
    ap.add_argument("--fitness", choices=sorted(ORACLES), default="frequency")
    ap.add_argument("--quadgrams", default=None, help="Quadgram file for --fitness quadgram")
    ap.add_argument("--workers", type=int, default=1, help="Parallel runs (default: %(default)s)")
    ap.add_argument("--polish", type=int, default=0, metavar="STEPS",
                    help="Refine each run's best key with STEPS of simulated annealing")
    ap.add_argument("--quiet", action="store_true", help="No per-generation output")
    return ap


def main(argv=None):
    args = build_parser().parse_args(argv)
    if args.runs < 1:
        raise SystemExit("--runs must be at least 1")

    try:
        key_length, ciphertext = read_data_file(args.data)
    except DataFileError as err:
        raise SystemExit(str(err))

    crossover_pct = args.crossover
    if crossover_pct is None:
        crossover_pct = prompt_number("Enter crossover rate (0-100)%: ")
    mutation_pct = args.mutation
    if mutation_pct is None:
        mutation_pct = prompt_number("Enter mutation rate (0-100)%: ")
    pop_size = args.pop
    if pop_size is None:
        pop_size = prompt_number("Enter population size: ", int)
    max_gen = args.gens
    if max_gen is None:
        max_gen = prompt_number("Enter maximum number of generations: ", int)

    tournament = args.tournament
    if tournament is None:
        tournament = random.Random(args.seed).randint(*TOURNAMENT_RANGE)

    try:
        config = RunConfiguration(
            crossover_rate=percent_to_rate(crossover_pct),
            mutation_rate=percent_to_rate(mutation_pct),
            tournament_size=tournament,
            population_size=pop_size,
            chromosome_length=key_length,
            max_generations=max_gen,
            ciphertext=ciphertext,
            crossover_mode=args.crossover_mode,
            patience=args.patience,
        )
        oracle = make_oracle(args.fitness, args.quadgrams)
    except (ValueError, OSError) as err:
        raise SystemExit(f"Invalid configuration: {err}")

    base_seed = args.seed if args.seed is not None else time.time_ns() // 1_000_000
    seeds = [base_seed + i for i in range(args.runs)]

    print("Datafile:", args.data)
    print("Population Size:", config.population_size)
    print("Crossover Rate:", config.crossover_rate)
    print("Mutation Rate:", config.mutation_rate)
    print("Tournament Size:", config.tournament_size)
    print("Chromosome Length:", config.chromosome_length)

    if args.workers > 1:
        results = tqdm(run_many(config, seeds, oracle, workers=args.workers),
                       total=len(seeds), desc="runs", disable=args.quiet)
    else:
        results = _sequential_runs(config, seeds, oracle, args.quiet)

    overall = None
    for run_no, result in enumerate(results, start=1):
        append_records(result.records, args.log)
        print(f"[run {run_no}] seed {result.seed} | best {result.best_fitness:.4f} | key {result.best_key}")
        print(f"[run {run_no}] plaintext: {result.plaintext[:80]}")
        if args.polish > 0:
            from ga_polish import polish_key
            key, score = polish_key(result.best_key, ciphertext, oracle, args.polish, seed=result.seed)
            print(f"[run {run_no}] polished key {key} | fitness {score:.4f}")
        if overall is None or result.best_fitness < overall.best_fitness:
            overall = result

    print("Best score:", overall.best_fitness)
    print("Best key:", overall.best_key)
    print("All runs completed. Data has been written to", args.log)


def _sequential_runs(config, seeds, oracle, quiet):
    for n, seed in enumerate(seeds, start=1):
        with tqdm(total=config.max_generations, desc=f"run {n}/{len(seeds)}", disable=quiet) as bar:
            def progress(rec):
                bar.update(1)
                if not quiet:
                    tqdm.write(f"Generation: {rec.generation} - Best Fitness: {rec.best_fitness}"
                               f" - Average Fitness: {rec.average_fitness}")
            result = run_ga(config, seed, oracle, progress=progress)
        yield result


if __name__ == "__main__":
    main(sys.argv[1:])
