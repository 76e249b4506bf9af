import random

import matplotlib

matplotlib.use("Agg")

import pytest  # noqa: E402

from PAL4BioInfo.seq_alignment import blosum62, new_score_matrix  # noqa: E402
from PAL4BioInfo.seq_io import Sequence  # noqa: E402

AMINO_ACIDS = "ARNDCQEGHILKMFPSTWYV"


@pytest.fixture
def b62():
    return blosum62()


@pytest.fixture
def dna_matrix():
    return new_score_matrix(1, -1)


@pytest.fixture
def random_pairs():
    """Deterministic random protein pairs of varying length"""
    rng = random.Random(7)
    pairs = []
    for _ in range(12):
        m = rng.randint(0, 25)
        n = rng.randint(0, 25)
        q = "".join(rng.choice(AMINO_ACIDS) for _ in range(m))
        s = "".join(rng.choice(AMINO_ACIDS) for _ in range(n))
        pairs.append((Sequence("q", q), Sequence("s", s)))
    return pairs
