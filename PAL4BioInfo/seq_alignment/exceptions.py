"""
Errors raised by the alignment engine

All of them signal a broken contract (bad residue, malformed score table,
inconsistent traceback) and are meant to propagate to the caller.
Running out of local alignments is not an error: LocalAlignment.align()
simply returns False.
"""


class AlignmentError(ValueError):
    """Base class for alignment contract violations"""


class UnknownResidueError(AlignmentError):
    """Residue is not part of the substitution matrix alphabet"""

    def __init__(self, residue, action: str = "score"):
        self.residue = residue
        self.action = action
        super().__init__(f"can't {action} residue {residue!r}: not in alphabet")


class ScoreMatrixParseError(AlignmentError):
    """Substitution matrix table could not be parsed"""


class TraceLengthError(AlignmentError):
    """Aligned query and subject have different lengths"""
