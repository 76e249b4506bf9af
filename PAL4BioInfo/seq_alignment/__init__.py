"""
Sequence Alignment Module
Global, overlap and local pairwise alignment with affine gaps
"""

from .exceptions import (
    AlignmentError,
    ScoreMatrixParseError,
    TraceLengthError,
    UnknownResidueError
)
from .formatting import DEFAULT_LINE_LENGTH, format_alignment
from .matrix import Cell, DPMatrix
from .pairwise import (
    Alignment,
    Coordinate,
    GlobalAlignment,
    LocalAlignment,
    LocalState,
    OverlapAlignment,
    new_global_alignment,
    new_local_alignment,
    new_overlap_alignment,
    pairwise
)
from .scoring import (
    ALPHABET,
    BLOSUM62,
    SubstitutionMatrix,
    blosum62,
    new_score_matrix,
    parse_score_matrix,
    read_score_matrix
)

__all__ = [
    "Alignment",
    "AlignmentError",
    "ALPHABET",
    "BLOSUM62",
    "Cell",
    "Coordinate",
    "DEFAULT_LINE_LENGTH",
    "DPMatrix",
    "GlobalAlignment",
    "LocalAlignment",
    "LocalState",
    "OverlapAlignment",
    "ScoreMatrixParseError",
    "SubstitutionMatrix",
    "TraceLengthError",
    "UnknownResidueError",
    "blosum62",
    "format_alignment",
    "new_global_alignment",
    "new_local_alignment",
    "new_overlap_alignment",
    "new_score_matrix",
    "pairwise",
    "parse_score_matrix",
    "read_score_matrix"
]
