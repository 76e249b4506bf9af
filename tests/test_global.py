import pytest

from PAL4BioInfo.seq_alignment import (
    GlobalAlignment,
    UnknownResidueError,
    new_global_alignment,
)
from PAL4BioInfo.seq_io import Sequence

GAP = ord("-")


def _count_errors(qa, sa):
    gaps = sum(1 for a, b in zip(qa, sa) if a == GAP or b == GAP)
    mismatches = sum(1 for a, b in zip(qa, sa) if a != GAP and b != GAP and a != b)
    return gaps, mismatches


def _check_invariants(aln):
    qa, sa = aln.raw_alignment()
    assert len(qa) == len(sa)
    assert all(not (a == GAP and b == GAP) for a, b in zip(qa, sa))
    assert qa.replace(b"-", b"") == aln.query.data
    assert sa.replace(b"-", b"") == aln.subject.data
    assert (aln.gaps(), aln.mismatches()) == _count_errors(qa, sa)


def test_regression_baseline(b62):
    q = Sequence("q1", "MKFLALF")
    s = Sequence("s1", "MKYLILLF")
    aln = new_global_alignment(q, s, b62, -5, -2)
    assert isinstance(aln, GlobalAlignment)
    aln.align()

    assert aln.score() == 19
    assert aln.raw_alignment() == (b"MKFLAL-F", b"MKYLILLF")
    assert aln.gaps() == 1
    assert aln.mismatches() == 2
    _check_invariants(aln)


def test_reproducible(b62):
    results = []
    for _ in range(2):
        aln = new_global_alignment(Sequence("q", "MKFLALF"), Sequence("s", "MKYLILLF"), b62, -5, -2)
        aln.align()
        results.append((aln.score(), aln.raw_alignment(), aln.gaps(), aln.mismatches()))
    assert results[0] == results[1]


def test_score_is_last_cell(random_pairs, b62):
    for q, s in random_pairs:
        aln = new_global_alignment(q, s, b62, -11, -1)
        aln.align()
        dp = aln.programming_matrix()
        assert aln.score() == dp.V[len(q), len(s)]
        _check_invariants(aln)


def test_unsolved_state(b62):
    aln = new_global_alignment(Sequence("q", "MK"), Sequence("s", "MKF"), b62, -5, -2)
    assert aln.raw_alignment() == (b"", b"")
    assert aln.score() == 0
    assert aln.programming_matrix().shape == (3, 4)


def test_identical_sequences(dna_matrix):
    aln = new_global_alignment(Sequence("a", "ACGTACGT"), Sequence("b", "ACGTACGT"), dna_matrix, -5, -2)
    aln.align()
    assert aln.score() == 8
    assert aln.gaps() == 0
    assert aln.mismatches() == 0


def test_lowercase_scores_like_uppercase(dna_matrix):
    aln = new_global_alignment(Sequence("a", "ACGTACGT"), Sequence("b", "acgtacgt"), dna_matrix, -5, -2)
    aln.align()
    assert aln.score() == 8
    assert aln.gaps() == 0


def test_empty_subject(dna_matrix):
    aln = new_global_alignment(Sequence("a", "ACG"), Sequence("b", ""), dna_matrix, -5, -2)
    aln.align()
    assert aln.score() == -11
    assert aln.raw_alignment() == (b"ACG", b"---")
    assert aln.gaps() == 3


def test_empty_query(dna_matrix):
    aln = new_global_alignment(Sequence("a", ""), Sequence("b", "AC"), dna_matrix, -5, -2)
    aln.align()
    assert aln.score() == -9
    assert aln.raw_alignment() == (b"--", b"AC")


def test_affine_gap_is_one_run(dna_matrix):
    # one gap of length 3 beats three separate gaps
    aln = new_global_alignment(Sequence("a", "AAAGGGCCC"), Sequence("b", "AAACCC"), dna_matrix, -5, -1)
    aln.align()
    qa, sa = aln.raw_alignment()
    assert qa == b"AAAGGGCCC"
    assert sa == b"AAA---CCC"
    assert aln.score() == 6 - 5 - 3


def test_unknown_residue_aborts(b62):
    aln = new_global_alignment(Sequence("q", "MK1"), Sequence("s", "MKF"), b62, -5, -2)
    with pytest.raises(UnknownResidueError):
        aln.align()
