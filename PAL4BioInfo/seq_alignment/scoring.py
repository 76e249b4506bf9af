"""
Substitution matrices for pairwise alignment

A SubstitutionMatrix scores residue pairs over a fixed alphabet that
covers the 20 amino acids, the nucleotides they share letters with,
ambiguity codes (B, Z, J), unknown (X), selenocysteine (U) and stop (*).

Two ways to build one:
- new_score_matrix(match, mismatch): match on the diagonal, mismatch elsewhere
- parse_score_matrix(text) / read_score_matrix(filename): text table, e.g.

    #  comment lines start with '#'
       A  R  N
    A  4 -1 -2
    R -1  5  0
    N -2  0  6

Pairs the table does not mention keep the (1, -1) defaults.
"""

import logging
from functools import lru_cache
from typing import IO, Dict, Iterable, List, Union

import numpy as np

from .exceptions import AlignmentError, ScoreMatrixParseError, UnknownResidueError
from .formatting import tabulate

logger = logging.getLogger(__name__)

ALPHABET = "ARNDCQEGHIJLKMFPSTWYVBZX*U"

Residue = Union[int, str, bytes]


# COMPLETE BLOSUM62 MATRIX - Protein substitution matrix (NCBI layout)
BLOSUM62 = """\
#  Matrix made by matblas from blosum62.iij
#  BLOSUM Clustered Scoring Matrix in 1/2 Bit Units
   A  R  N  D  C  Q  E  G  H  I  L  K  M  F  P  S  T  W  Y  V  B  Z  X  *
A  4 -1 -2 -2  0 -1 -1  0 -2 -1 -1 -1 -1 -2 -1  1  0 -3 -2  0 -2 -1  0 -4
R -1  5  0 -2 -3  1  0 -2  0 -3 -2  2 -1 -3 -2 -1 -1 -3 -2 -3 -1  0 -1 -4
N -2  0  6  1 -3  0  0  0  1 -3 -3  0 -2 -3 -2  1  0 -4 -2 -3  3  0 -1 -4
D -2 -2  1  6 -3  0  2 -1 -1 -3 -4 -1 -3 -3 -1  0 -1 -4 -3 -3  4  1 -1 -4
C  0 -3 -3 -3  9 -3 -4 -3 -3 -1 -1 -3 -1 -2 -3 -1 -1 -2 -2 -1 -3 -3 -2 -4
Q -1  1  0  0 -3  5  2 -2  0 -3 -2  1  0 -3 -1  0 -1 -2 -1 -2  0  3 -1 -4
E -1  0  0  2 -4  2  5 -2  0 -3 -3  1 -2 -3 -1  0 -1 -3 -2 -2  1  4 -1 -4
G  0 -2  0 -1 -3 -2 -2  6 -2 -4 -4 -2 -3 -3 -2  0 -2 -2 -3 -3 -1 -2 -1 -4
H -2  0  1 -1 -3  0  0 -2  8 -3 -3 -1 -2 -1 -2 -1 -2 -2  2 -3  0  0 -1 -4
I -1 -3 -3 -3 -1 -3 -3 -4 -3  4  2 -3  1  0 -3 -2 -1 -3 -1  3 -3 -3 -1 -4
L -1 -2 -3 -4 -1 -2 -3 -4 -3  2  4 -2  2  0 -3 -2 -1 -2 -1  1 -4 -3 -1 -4
K -1  2  0 -1 -3  1  1 -2 -1 -3 -2  5 -1 -3 -1  0 -1 -3 -2 -2  0  1 -1 -4
M -1 -1 -2 -3 -1  0 -2 -3 -2  1  2 -1  5  0 -2 -1 -1 -1 -1  1 -3 -1 -1 -4
F -2 -3 -3 -3 -2 -3 -3 -3 -1  0  0 -3  0  6 -4 -2 -2  1  3 -1 -3 -3 -1 -4
P -1 -2 -2 -1 -3 -1 -1 -2 -2 -3 -3 -1 -2 -4  7 -1 -1 -4 -3 -2 -2 -1 -2 -4
S  1 -1  1  0 -1  0  0  0 -1 -2 -2  0 -1 -2 -1  4  1 -3 -2 -2  0  0  0 -4
T  0 -1  0 -1 -1 -1 -1 -2 -2 -1 -1 -1 -1 -2 -1  1  5 -2 -2  0 -1 -1  0 -4
W -3 -3 -4 -4 -2 -2 -3 -2 -2 -3 -2 -3 -1  1 -4 -3 -2 11  2 -3 -4 -3 -2 -4
Y -2 -2 -2 -3 -2 -1 -2 -3  2 -1 -1 -2 -1  3 -3 -2 -2  2  7 -1 -3 -2 -1 -4
V  0 -3 -3 -3 -1 -2 -2 -3 -3  3  1 -2  1 -1 -2 -2  0 -3 -1  4 -3 -2 -1 -4
B -2 -1  3  4 -3  0  1 -1  0 -3 -4  0 -3 -3 -2  0 -1 -4 -3 -3  4  1 -1 -4
Z -1  0  0  1 -3  3  4 -2  0 -3 -3  1 -1 -3 -1  0 -1 -3 -2 -2  1  4 -1 -4
X  0 -1 -1 -1 -2 -1 -1 -1 -1 -1 -1 -1 -1 -1 -2  0  0 -2 -1 -1 -1 -1 -1 -4
* -4 -4 -4 -4 -4 -4 -4 -4 -4 -4 -4 -4 -4 -4 -4 -4 -4 -4 -4 -4 -4 -4 -4  1
"""


def _residue_code(r: Residue) -> int:
    """Residue as an uppercase byte value"""
    if isinstance(r, (str, bytes)):
        if len(r) != 1:
            raise UnknownResidueError(r)
        r = ord(r) if isinstance(r, str) else r[0]
    r = int(r)
    if 97 <= r <= 122:
        r -= 32
    return r


class SubstitutionMatrix:
    """
    Symmetric residue-pair scores over ALPHABET

    The matrix is filled once at construction time, then frozen and only
    read, so one instance can be shared by any number of alignments.
    """

    def __init__(self, residues: str = ALPHABET, fill: float = 0.0):
        self.residues = residues
        self.values = np.full((len(residues), len(residues)), fill, dtype=np.float64)
        self._index: Dict[int, int] = {ord(r): i for i, r in enumerate(residues)}

        # byte -> matrix index, -1 for residues outside the alphabet
        self._translate = np.full(256, -1, dtype=np.intp)
        for code, i in self._index.items():
            self._translate[code] = i
            if 65 <= code <= 90:
                self._translate[code + 32] = i
        self.frozen = False

    def freeze(self) -> "SubstitutionMatrix":
        """Make the scores read-only; returns self"""
        self.values.flags.writeable = False
        self.frozen = True
        return self

    def _lookup(self, r: Residue, action: str) -> int:
        try:
            return self._index[_residue_code(r)]
        except (KeyError, TypeError, ValueError):
            raise UnknownResidueError(r, action) from None

    def score(self, r1: Residue, r2: Residue) -> float:
        """Score of the pair (r1, r2); case-insensitive"""
        return float(self.values[self._lookup(r1, "score"), self._lookup(r2, "score")])

    def set_score(self, r1: Residue, r2: Residue, value: float) -> None:
        """Set the symmetric entry (r1, r2)"""
        if self.frozen:
            raise AlignmentError("can't set score: substitution matrix is frozen")
        i = self._lookup(r1, "set score for")
        j = self._lookup(r2, "set score for")
        self.values[i, j] = value
        self.values[j, i] = value

    def encode(self, seq: Union[bytes, str]) -> np.ndarray:
        """Matrix indices of all residues in seq"""
        if isinstance(seq, str):
            try:
                seq = seq.encode("ascii")
            except UnicodeEncodeError:
                bad = next(ch for ch in seq if ord(ch) > 127)
                raise UnknownResidueError(bad) from None
        codes = np.frombuffer(bytes(seq), dtype=np.uint8)
        idx = self._translate[codes]
        if idx.size and (idx < 0).any():
            bad = int(codes[np.argmax(idx < 0)])
            raise UnknownResidueError(chr(bad))
        return idx

    def pair_scores(self, query: Union[bytes, str], subject: Union[bytes, str]) -> np.ndarray:
        """
        (len(query) x len(subject)) grid of substitution scores,
        S[i, j] = score(query[i], subject[j])
        """
        qi = self.encode(query)
        si = self.encode(subject)
        return self.values[np.ix_(qi, si)]

    def __str__(self) -> str:
        lines = ["".join(f"\t{r:>2}" for r in self.residues)]
        for r, row in zip(self.residues, self.values):
            lines.append(r + "".join("\t%2.3g" % float(v) for v in row))
        return "\n".join(tabulate(lines))

    def __repr__(self) -> str:
        return f"SubstitutionMatrix(residues={self.residues!r})"


def _default_matrix(match: float, mismatch: float) -> SubstitutionMatrix:
    sm = SubstitutionMatrix(ALPHABET, fill=mismatch)
    np.fill_diagonal(sm.values, match)
    return sm


def new_score_matrix(match: float, mismatch: float) -> SubstitutionMatrix:
    """
    Build a matrix with `match` on the diagonal and `mismatch` elsewhere

    Example:
        >>> sm = new_score_matrix(1, -1)
        >>> sm.score('a', 'A'), sm.score('A', 'C')
        (1.0, -1.0)
    """
    return _default_matrix(match, mismatch).freeze()


def _parse_lines(lines: Iterable[str]) -> SubstitutionMatrix:
    sm = _default_matrix(1, -1)
    header: List[str] = []
    for lineno, line in enumerate(lines, start=1):
        fields = line.split()
        if not fields or fields[0].startswith("#"):
            continue
        if not header:
            header = fields
            continue
        if len(fields) - 1 > len(header):
            raise ScoreMatrixParseError(
                f"line {lineno}: {len(fields) - 1} scores for {len(header)} columns"
            )
        r1 = fields[0][0]
        for col, field in zip(header, fields[1:]):
            try:
                value = float(field)
            except ValueError:
                raise ScoreMatrixParseError(f"line {lineno}: couldn't parse {field!r}") from None
            sm.set_score(r1, col[0], value)
    if not header:
        logger.debug("score table without header; using match/mismatch defaults")
    return sm.freeze()


def parse_score_matrix(text: str) -> SubstitutionMatrix:
    """
    Parse a substitution matrix from its text table

    Args:
        text: table as printed by str(SubstitutionMatrix) or in NCBI layout

    Returns:
        SubstitutionMatrix

    Raises:
        ScoreMatrixParseError: a score is not a number or a row is too long
        UnknownResidueError: a residue is outside the alphabet
    """
    return _parse_lines(text.splitlines())


def read_score_matrix(source: Union[str, IO[str]]) -> SubstitutionMatrix:
    """
    Read a substitution matrix from a file name or an open text handle

    Example:
        >>> sm = read_score_matrix('BLOSUM62')
        >>> with open('BLOSUM62') as f:
        ...     sm = read_score_matrix(f)
    """
    if hasattr(source, "read"):
        return _parse_lines(source)
    with open(source, "r") as f:
        return _parse_lines(f)


@lru_cache(maxsize=None)
def blosum62() -> SubstitutionMatrix:
    """Shared BLOSUM62 matrix (parsed once)"""
    return parse_score_matrix(BLOSUM62)
