"""Fitness oracles for the Vigenère key GA.

An oracle is any callable ``oracle(key, ciphertext) -> float`` that is
deterministic and never raises for a key made of letters. Lower is better;
``WORST_FITNESS`` marks a key whose decryption cannot be scored.

Two oracles are provided
------------------------
``FrequencyFitness``
    Sum of absolute differences between the letter frequencies of the
    decryption and English letter frequencies (default).
``QuadgramFitness``
    Negated log10 quadgram likelihood of the decryption, loaded from a
    ``QUAD COUNT`` file (e.g. ``english_quadgrams.txt``) or a tiny built-in
    table.
"""

import math
import sys

from vigenere_cipher import ALPHABET, decrypt

WORST_FITNESS = sys.float_info.max

# a..z
ENGLISH_FREQ = [
    0.0817, 0.0149, 0.0278, 0.0425, 0.1270, 0.0223, 0.0202, 0.0609,
    0.0697, 0.0015, 0.0077, 0.0403, 0.0241, 0.0675, 0.0751, 0.0193,
    0.0010, 0.0599, 0.0633, 0.0906, 0.0276, 0.0098, 0.0236, 0.0015,
    0.0197, 0.0007,
]

QGRAM = {
    "TION": 126024,
    "THER": 113290,
    "HERE": 96550,
    "WITH": 70160,
    "IGHT": 77290,
    "NTHE": 109430,
    "THAT": 87170,
    "OFTH": 76960,
    "FTHE": 72490,
    "INGT": 64420,
}


def letters_only(text: str) -> str:
    return "".join(ch for ch in text.lower() if ch in ALPHABET)


class FrequencyFitness:
    """Distance between observed and expected English letter frequencies."""

    name = "frequency"

    def __init__(self, expected=None):
        self.expected = list(expected or ENGLISH_FREQ)
        if len(self.expected) != 26:
            raise ValueError("expected frequencies must have 26 entries")

    def score_text(self, text: str) -> float:
        clean = letters_only(text)
        if not clean:
            return WORST_FITNESS
        counts = [0] * 26
        for ch in clean:
            counts[ord(ch) - ord("a")] += 1
        n = len(clean)
        return sum(abs(c / n - e) for c, e in zip(counts, self.expected))

    def __call__(self, key: str, ciphertext: str) -> float:
        plain = decrypt(ciphertext, key)
        if plain is None:
            return WORST_FITNESS
        return self.score_text(plain)


def load_quadgrams(path):
    """Read a ``QUAD COUNT`` file into (log10 table, floor)."""
    counts = {}
    with open(path, "r") as f:
        for line in f:
            if not line.strip():
                continue
            quad, freq = line.split()
            counts[quad.upper()] = int(freq)
    return quad_logs(counts)


def quad_logs(counts):
    total = sum(counts.values())
    if total <= 0:
        raise ValueError("quadgram table is empty")
    qlog = {k: math.log10(v / total) for k, v in counts.items()}
    qfloor = math.log10(0.01 / total)
    return qlog, qfloor


class QuadgramFitness:
    """Negated quadgram log-likelihood; non-negative, lower is better."""

    name = "quadgram"

    def __init__(self, qlog=None, qfloor=None):
        if qlog is None:
            qlog, qfloor = quad_logs(QGRAM)
        self.qlog = qlog
        self.qfloor = qfloor

    @classmethod
    def from_file(cls, path):
        qlog, qfloor = load_quadgrams(path)
        return cls(qlog, qfloor)

    def score_text(self, text: str) -> float:
        clean = letters_only(text).upper()
        if len(clean) < 4:
            return WORST_FITNESS
        return -sum(self.qlog.get(clean[i:i + 4], self.qfloor)
                    for i in range(len(clean) - 3))

    def __call__(self, key: str, ciphertext: str) -> float:
        plain = decrypt(ciphertext, key)
        if plain is None:
            return WORST_FITNESS
        return self.score_text(plain)


ORACLES = {
    "frequency": FrequencyFitness,
    "quadgram": QuadgramFitness,
}


def make_oracle(name: str = "frequency", quadgrams=None):
    if name not in ORACLES:
        raise ValueError(f"unknown fitness oracle: {name}")
    if name == "quadgram" and quadgrams is not None:
        return QuadgramFitness.from_file(quadgrams)
    return ORACLES[name]()


def evaluate_population(population, ciphertext, oracle):
    return [oracle("".join(chrom), ciphertext) for chrom in population]
