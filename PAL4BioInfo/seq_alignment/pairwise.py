"""
Pairwise Sequence Alignment Module
Global, overlap and local alignment with affine gaps (Gotoh)

Every alignment follows the same life cycle:
    aln = new_global_alignment(query, subject, matrix, gap_open, gap_extend)
    aln.align()
    print(aln)

Local alignments can be asked for again and again; each call to align()
returns the next best alignment that shares no DP cell with the ones
before it, and False once there is none left.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import List, Literal, Optional, Tuple, Union

import numpy as np

from ..seq_io import Sequence, as_sequence
from .exceptions import TraceLengthError
from .formatting import DEFAULT_LINE_LENGTH, GAP, format_alignment
from .matrix import DPMatrix
from .scoring import SubstitutionMatrix, blosum62, new_score_matrix

logger = logging.getLogger(__name__)

DEFAULT_GAP_OPEN = -5.0
DEFAULT_GAP_EXTEND = -2.0

SeqLike = Union[Sequence, str, bytes]


@dataclass(frozen=True)
class Coordinate:
    """Start cell candidate for the local suboptimal search"""
    i: int
    j: int
    score: float


class Alignment:
    """
    State shared by all alignment types

    Holds the two sequences, the (shared, read-only) substitution matrix,
    the gap parameters, the DP matrix and the result of the last traceback.
    """

    def __init__(
        self,
        query: SeqLike,
        subject: SeqLike,
        matrix: SubstitutionMatrix,
        gap_open: float,
        gap_extend: float
    ):
        self.query = as_sequence(query, "query")
        self.subject = as_sequence(subject, "subject")
        self.matrix = matrix
        self.gap_open = float(gap_open)
        self.gap_extend = float(gap_extend)
        self.query_length = len(self.query)
        self.subject_length = len(self.subject)

        self.dp = DPMatrix(self.query_length, self.subject_length)

        self._qa = b""
        self._sa = b""
        self._score = 0.0
        self._gaps = 0
        self._mismatches = 0
        self.line_length = DEFAULT_LINE_LENGTH
        self.query_start = 0
        self.subject_start = 0

    # ----- accessors -----
    def programming_matrix(self) -> DPMatrix:
        """The (m+1) x (n+1) dynamic programming matrix"""
        return self.dp

    def raw_alignment(self) -> Tuple[bytes, bytes]:
        """Aligned query and subject, '-' marks a gap"""
        return self._qa, self._sa

    def score(self) -> float:
        return self._score

    def gaps(self) -> int:
        """Number of alignment columns containing a gap"""
        return self._gaps

    def mismatches(self) -> int:
        return self._mismatches

    def set_line_length(self, ll: int) -> None:
        """Columns per line in str(); non-positive values are ignored"""
        if ll > 0:
            self.line_length = ll

    def set_subject_start(self, s: int) -> None:
        self.subject_start = s

    def set_subject_length(self, n: int) -> None:
        self.subject_length = n

    def path(self) -> List[Tuple[int, int]]:
        """
        DP cells (i, j) crossed by the current alignment, starting at the
        cell before its first column
        """
        i, j = self.query_start, self.subject_start
        cells = [(i, j)]
        for qc, sc in zip(self._qa, self._sa):
            if qc != GAP:
                i += 1
            if sc != GAP:
                j += 1
            cells.append((i, j))
        return cells

    def __str__(self) -> str:
        return format_alignment(self)

    # ----- helpers for subclasses -----
    def _substitution_scores(self) -> np.ndarray:
        return self.matrix.pair_scores(self.query.data, self.subject.data)

    def _traceback(self, i: int, j: int, q_out: List[int], s_out: List[int],
                   to_origin: bool = True) -> Tuple[int, int]:
        """
        Walk back from (i, j), appending aligned pairs in reverse order.

        Runs until (0, 0) when to_origin, otherwise until the first
        boundary row or column. Returns the cell where the walk stopped.
        """
        q, s = self.query.data, self.subject.data
        step = self.dp.step
        while (i > 0 or j > 0) if to_origin else (i > 0 and j > 0):
            move = step(i, j)
            if move == 0:
                q_out.append(q[i - 1])
                s_out.append(GAP)
                i -= 1
            elif move == 1:
                q_out.append(GAP)
                s_out.append(s[j - 1])
                j -= 1
            else:
                q_out.append(q[i - 1])
                s_out.append(s[j - 1])
                i -= 1
                j -= 1
        return i, j

    def _finish(self, q_rev: List[int], s_rev: List[int]) -> None:
        """Store the reversed traceback and recount errors"""
        self._qa = bytes(reversed(q_rev))
        self._sa = bytes(reversed(s_rev))
        self._count_errors()

    def _count_errors(self) -> None:
        if len(self._qa) != len(self._sa):
            raise TraceLengthError("aligned sequences don't have same length")
        gaps = mismatches = 0
        for r1, r2 in zip(self._qa, self._sa):
            if r1 == GAP or r2 == GAP:
                gaps += 1
            elif r1 != r2:
                mismatches += 1
        self._gaps = gaps
        self._mismatches = mismatches


class GlobalAlignment(Alignment):
    """End-to-end alignment of both sequences (Needleman-Wunsch-Gotoh)"""

    def align(self) -> None:
        m, n = self.query_length, self.subject_length
        dp = self.dp
        dp.init_global_boundary(self.gap_open, self.gap_extend)
        dp.fill(self._substitution_scores(), self.gap_open, self.gap_extend)
        self._score = float(dp.V[m, n])

        q_rev: List[int] = []
        s_rev: List[int] = []
        self._traceback(m, n, q_rev, s_rev, to_origin=True)
        self._finish(q_rev, s_rev)
        logger.debug("global alignment: score %g, %d columns", self._score, len(self._qa))


class OverlapAlignment(Alignment):
    """
    Overlap (semi-global) alignment: gaps at either end of either
    sequence are free
    """

    def _endpoint(self) -> Tuple[int, int]:
        """
        Best cell on the last row or column. The row is scanned first and
        keeps the first maximum; the column only wins if strictly greater.
        """
        m, n = self.query_length, self.subject_length
        V = self.dp.V
        i, j = m, int(np.argmax(V[m]))
        k = int(np.argmax(V[:, n]))
        if V[k, n] > V[i, j]:
            i, j = k, n
        return i, j

    def align(self) -> None:
        m, n = self.query_length, self.subject_length
        q, s = self.query.data, self.subject.data
        dp = self.dp
        dp.fill(self._substitution_scores(), self.gap_open, self.gap_extend)

        i, j = self._endpoint()
        self._score = float(dp.V[i, j])
        logger.debug("overlap endpoint (%d, %d), score %g", i, j, self._score)

        q_rev: List[int] = []
        s_rev: List[int] = []
        # trailing overhang
        for k in range(m, i, -1):
            q_rev.append(q[k - 1])
            s_rev.append(GAP)
        for k in range(n, j, -1):
            q_rev.append(GAP)
            s_rev.append(s[k - 1])

        i, j = self._traceback(i, j, q_rev, s_rev, to_origin=False)

        # leading overhang
        for k in range(i, 0, -1):
            q_rev.append(q[k - 1])
            s_rev.append(GAP)
        for k in range(j, 0, -1):
            q_rev.append(GAP)
            s_rev.append(s[k - 1])

        self._finish(q_rev, s_rev)

    def trim_query(self) -> None:
        """
        Remove the columns flanking the query that hold a query gap.

        Each leading column removed advances the subject start; the score
        is left as is. Trimming twice changes nothing.
        """
        qa, sa = self._qa, self._sa
        if len(qa) != len(sa):
            raise TraceLengthError("can't trim alignments of unequal length")
        start, end = 0, len(qa)
        while start < end and qa[start] == GAP:
            start += 1
        while end > start and qa[end - 1] == GAP:
            end -= 1

        self.subject_start += start
        self._gaps -= start + (len(qa) - end)
        self._qa = qa[start:end]
        self._sa = sa[start:end]


class LocalState(Enum):
    UNSTARTED = "unstarted"
    FIRST_SCAN = "first_scan"
    RANKED = "ranked"
    EXHAUSTED = "exhausted"


class LocalAlignment(Alignment):
    """
    Local alignment (Smith-Waterman-Gotoh) with ranked, non-overlapping
    suboptimal alignments (Waterman-Eggert)

    The first call to align() fills the matrix and traces back from the
    best cell. The second call ranks every cell not yet used by a
    traceback; later calls keep consuming that ranking. A traceback that
    runs into a cell used before is dropped, so no two alignments share a
    cell and their scores never increase.
    """

    def __init__(
        self,
        query: SeqLike,
        subject: SeqLike,
        matrix: SubstitutionMatrix,
        gap_open: float,
        gap_extend: float
    ):
        super().__init__(query, subject, matrix, gap_open, gap_extend)
        self.state = LocalState.UNSTARTED
        self.count = 0
        self._candidates: List[Coordinate] = []

    def _best_cell(self) -> Optional[Coordinate]:
        interior = self.dp.V[1:, 1:]
        if interior.size == 0:
            return None
        i, j = np.unravel_index(int(np.argmax(interior)), interior.shape)
        return Coordinate(int(i) + 1, int(j) + 1, float(interior[i, j]))

    def _rank_candidates(self) -> List[Coordinate]:
        V = self.dp.V[1:, 1:]
        free = ~self.dp.visited[1:, 1:] & (V > 0)
        rows, cols = np.nonzero(free)
        scores = V[rows, cols]
        order = np.argsort(-scores, kind="stable")
        logger.debug("ranked %d candidate cells", len(order))
        return [Coordinate(int(rows[k]) + 1, int(cols[k]) + 1, float(scores[k])) for k in order]

    def _walk(self, c: Coordinate) -> Optional[Tuple[int, int, List[int], List[int]]]:
        """
        Trace back from c while V > 0, marking cells as visited.
        Returns None if the path touches a cell visited before.
        """
        dp = self.dp
        q, s = self.query.data, self.subject.data
        i, j = c.i, c.j
        if dp.visited[i, j]:
            return None

        q_rev: List[int] = []
        s_rev: List[int] = []
        while dp.V[i, j] > 0:
            dp.visited[i, j] = True
            move = dp.step(i, j)
            if move == 0:
                q_rev.append(q[i - 1])
                s_rev.append(GAP)
                i -= 1
            elif move == 1:
                q_rev.append(GAP)
                s_rev.append(s[j - 1])
                j -= 1
            else:
                q_rev.append(q[i - 1])
                s_rev.append(s[j - 1])
                i -= 1
                j -= 1
            if dp.visited[i, j]:
                return None
        return i, j, q_rev, s_rev

    def align(self) -> bool:
        """
        Compute the next alignment.

        Returns:
        --------
        bool
            True if a further non-overlapping alignment was found. On False
            the previous result stays in place.
        """
        if self.state is LocalState.EXHAUSTED:
            return False

        if self.state is LocalState.UNSTARTED:
            self.dp.fill(self._substitution_scores(), self.gap_open, self.gap_extend, floor=0.0)
            best = self._best_cell()
            self._candidates = [best] if best is not None and best.score > 0 else []
            self.state = LocalState.FIRST_SCAN
        elif self.state is LocalState.FIRST_SCAN:
            self._candidates = self._rank_candidates()
            self.state = LocalState.RANKED

        for k, c in enumerate(self._candidates):
            walk = self._walk(c)
            if walk is None:
                logger.debug("candidate (%d, %d) overlaps a previous alignment", c.i, c.j)
                continue
            i, j, q_rev, s_rev = walk
            self._score = c.score
            self.query_start = i
            self.subject_start = j
            self._finish(q_rev, s_rev)
            self._candidates = self._candidates[k + 1:]
            self.count += 1
            logger.debug("local alignment %d: score %g at (%d, %d)", self.count, c.score, c.i, c.j)
            return True

        self._candidates = []
        self.state = LocalState.EXHAUSTED
        return False


def new_global_alignment(query: SeqLike, subject: SeqLike, matrix: SubstitutionMatrix,
                         gap_open: float, gap_extend: float) -> GlobalAlignment:
    """Global alignment of query and subject; call align() to compute it"""
    return GlobalAlignment(query, subject, matrix, gap_open, gap_extend)


def new_overlap_alignment(query: SeqLike, subject: SeqLike, matrix: SubstitutionMatrix,
                          gap_open: float, gap_extend: float) -> OverlapAlignment:
    """Overlap alignment of query and subject; call align() to compute it"""
    return OverlapAlignment(query, subject, matrix, gap_open, gap_extend)


def new_local_alignment(query: SeqLike, subject: SeqLike, matrix: SubstitutionMatrix,
                        gap_open: float, gap_extend: float) -> LocalAlignment:
    """Local alignment of query and subject; call align() repeatedly for more"""
    return LocalAlignment(query, subject, matrix, gap_open, gap_extend)


_CONSTRUCTORS = {
    "global": new_global_alignment,
    "overlap": new_overlap_alignment,
    "local": new_local_alignment,
}


# MAIN CONVENIENCE FUNCTION
def pairwise(
    seq1: SeqLike,
    seq2: SeqLike,
    mode: Literal["global", "overlap", "local"] = "global",
    gap_open: Optional[float] = None,
    gap_extend: Optional[float] = None,
    substitution_matrix: Union[str, SubstitutionMatrix, None] = "BLOSUM62",
    match: float = 1.0,
    mismatch: float = -1.0,
    line_length: Optional[int] = None,
    verbose: bool = False
) -> Alignment:
    """
    Align two sequences in one call

    Parameters:
    -----------
    seq1 : Sequence, str or bytes
        Query sequence
    seq2 : Sequence, str or bytes
        Subject sequence
    mode : str
        "global", "overlap" or "local" (default "global")
    gap_open : float, optional
        Gap opening score, charged once per gap (default -5)
    gap_extend : float, optional
        Gap extension score, charged per gap residue (default -2)
    substitution_matrix : str, SubstitutionMatrix or None
        "BLOSUM62" (default), a ready matrix, or None for a
        match/mismatch matrix built from `match` and `mismatch`
    line_length : int, optional
        Columns per line when printing the alignment
    verbose : bool
        Print a short report (default False)

    Returns:
    --------
    Alignment
        Solved alignment. For local mode this is the best alignment; call
        align() on it again for the next one.

    Examples:
    ---------
    >>> aln = pairwise("MKFLALF", "MKYLILLF")
    >>> aln.score()
    19.0
    >>> print(aln)
    Query   query   (7 residues)
    Subject subject (8 residues)
    Score   19
    Errors  3 (1 gap, 2 mismatches)
    <BLANKLINE>
    <BLANKLINE>
    Query   1 MKFLAL-F 7
              ||:| | |
    Subject 1 MKYLILLF 8
    //
    """
    if mode not in _CONSTRUCTORS:
        raise ValueError(f"Unknown mode: {mode}")

    if gap_open is None:
        gap_open = DEFAULT_GAP_OPEN
    if gap_extend is None:
        gap_extend = DEFAULT_GAP_EXTEND

    if isinstance(substitution_matrix, SubstitutionMatrix):
        matrix = substitution_matrix
    elif substitution_matrix is None:
        matrix = new_score_matrix(match, mismatch)
    elif substitution_matrix.upper() == "BLOSUM62":
        matrix = blosum62()
    else:
        raise ValueError(f"Unknown substitution matrix: {substitution_matrix}")

    aln = _CONSTRUCTORS[mode](seq1, seq2, matrix, gap_open, gap_extend)
    if line_length is not None:
        aln.set_line_length(line_length)

    if verbose:
        print("\n" + "=" * 70)
        print("PAIRWISE SEQUENCE ALIGNMENT")
        print("=" * 70)
        print(f"Query:   {aln.query.header} ({aln.query_length} residues)")
        print(f"Subject: {aln.subject.header} ({aln.subject_length} residues)")
        print(f"Mode: {mode}")
        print(f"Gap opening: {gap_open}, Gap extension: {gap_extend}")
        print("=" * 70)

    found = aln.align()

    if verbose:
        if found is False:
            print("\nNo local alignment with positive score")
        else:
            print(f"\nScore: {aln.score():g}")
            print(f"Gaps: {aln.gaps()}, Mismatches: {aln.mismatches()}")
            print(f"Length: {len(aln.raw_alignment()[0])}")
        print("=" * 70 + "\n")

    return aln
