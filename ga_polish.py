"""Simulated-annealing polish of a GA key (one letter changed per move)."""

import random
import string

from simanneal import Annealer

LETTERS = string.ascii_lowercase

# ---------------- annealing schedule --------------------------------------------
TMAX = 0.5
TMIN = 0.001


class KeyState:
    def __init__(self, key, ciphertext, oracle, rng):
        self.ciphertext = ciphertext
        self.oracle = oracle
        self.rng = rng
        self.key = list(key)


class KeyPolisher(Annealer):
    copy_strategy = "slice"

    def __init__(self, key_state):
        self.ks = key_state
        super().__init__(list(key_state.key))

    def move(self):
        i = self.ks.rng.randrange(len(self.state))
        self.state[i] = self.ks.rng.choice(LETTERS)

    def energy(self):
        return self.ks.oracle("".join(self.state), self.ks.ciphertext)


def polish_key(key, ciphertext, oracle, steps, seed=None):
    """Anneal ``key`` for ``steps`` moves; returns ``(key, fitness)``.

    The returned key is never worse than the one passed in. ``simanneal``
    draws its acceptance tests from the global ``random`` module, so it is
    seeded here and restored afterwards.
    """
    start_score = oracle(key, ciphertext)
    if steps <= 0:
        return key, start_score

    saved = random.getstate()
    random.seed(seed)
    try:
        solver = KeyPolisher(KeyState(key, ciphertext, oracle, random.Random(seed)))
        solver.Tmax, solver.Tmin, solver.steps = TMAX, TMIN, steps
        solver.updates = 0
        best_state, best_e = solver.anneal()
    finally:
        random.setstate(saved)

    if best_e < start_score:
        return "".join(best_state), best_e
    return key, start_score
