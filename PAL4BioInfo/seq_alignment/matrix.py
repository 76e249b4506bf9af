"""
Dynamic programming matrix for affine-gap (Gotoh) alignment

Each cell holds three states plus their maximum:
    E : best alignment ending with a query residue against a gap
    F : best alignment ending with a gap against a subject residue
    G : best alignment ending with a substitution
    V : max(E, F, G)
and a `visited` flag used by the local suboptimal search.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Tuple

import numpy as np

logger = logging.getLogger(__name__)

NEG_INF = float("-inf")


@dataclass
class Cell:
    """Snapshot of one DP cell"""
    E: float
    F: float
    G: float
    V: float
    visited: bool = False


class DPMatrix:
    """
    Dense (m+1) x (n+1) grid of cells, one numpy array per state

    Allocated once for a pair of sequence lengths and never resized.
    Row 0 and column 0 are boundary cells; they start at zero.
    """

    def __init__(self, m: int, n: int):
        self.m = m
        self.n = n
        shape = (m + 1, n + 1)
        self.E = np.zeros(shape, dtype=np.float64)
        self.F = np.zeros(shape, dtype=np.float64)
        self.G = np.zeros(shape, dtype=np.float64)
        self.V = np.zeros(shape, dtype=np.float64)
        self.visited = np.zeros(shape, dtype=bool)
        logger.debug("allocated %d x %d DP matrix", m + 1, n + 1)

    @property
    def shape(self) -> Tuple[int, int]:
        return self.m + 1, self.n + 1

    def cell(self, i: int, j: int) -> Cell:
        return Cell(
            E=float(self.E[i, j]),
            F=float(self.F[i, j]),
            G=float(self.G[i, j]),
            V=float(self.V[i, j]),
            visited=bool(self.visited[i, j]),
        )

    def __getitem__(self, ij: Tuple[int, int]) -> Cell:
        return self.cell(*ij)

    def init_global_boundary(self, gap_open: float, gap_extend: float) -> None:
        """
        Leading gaps cost gap_open + k * gap_extend; the opposite gap state
        and the match state are -inf on the boundary so they never win.
        """
        k = np.arange(1, self.m + 1, dtype=np.float64)
        self.E[1:, 0] = gap_open + k * gap_extend
        self.V[1:, 0] = self.E[1:, 0]
        self.F[1:, 0] = NEG_INF
        self.G[1:, 0] = NEG_INF

        k = np.arange(1, self.n + 1, dtype=np.float64)
        self.F[0, 1:] = gap_open + k * gap_extend
        self.V[0, 1:] = self.F[0, 1:]
        self.E[0, 1:] = NEG_INF
        self.G[0, 1:] = NEG_INF

    def fill(self,
             scores: np.ndarray,
             gap_open: float,
             gap_extend: float,
             floor: Optional[float] = None) -> None:
        """
        Fill the interior with the Gotoh recurrence

            E(i,j) = max(E(i-1,j), V(i-1,j) + gap_open) + gap_extend
            F(i,j) = max(F(i,j-1), V(i,j-1) + gap_open) + gap_extend
            G(i,j) = V(i-1,j-1) + scores[i-1, j-1]
            V(i,j) = max(E, F, G)

        With `floor` set (local alignment) V is clamped from below; E, F
        and G keep their raw values.
        """
        m, n = self.m, self.n
        if m == 0 or n == 0:
            return

        # row-wise on python floats; F depends on its left neighbour
        e_up = self.E[0].tolist()
        v_up = self.V[0].tolist()
        for i in range(1, m + 1):
            s_row = scores[i - 1].tolist()
            e_row = [float(self.E[i, 0])] + [0.0] * n
            f_row = [float(self.F[i, 0])] + [0.0] * n
            g_row = [float(self.G[i, 0])] + [0.0] * n
            v_row = [float(self.V[i, 0])] + [0.0] * n
            for j in range(1, n + 1):
                e = max(e_up[j], v_up[j] + gap_open) + gap_extend
                f = max(f_row[j - 1], v_row[j - 1] + gap_open) + gap_extend
                g = v_up[j - 1] + s_row[j - 1]
                v = max(e, f, g)
                if floor is not None and v < floor:
                    v = floor
                e_row[j] = e
                f_row[j] = f
                g_row[j] = g
                v_row[j] = v
            self.E[i] = e_row
            self.F[i] = f_row
            self.G[i] = g_row
            self.V[i] = v_row
            e_up, v_up = e_row, v_row

        logger.debug("filled %d x %d cells", m, n)

    def step(self, i: int, j: int) -> int:
        """
        Traceback move out of cell (i, j), tested in fixed order:
        0 = E (query residue vs gap), 1 = F (gap vs subject residue),
        2 = G (substitution)
        """
        v = self.V[i, j]
        if v == self.E[i, j]:
            return 0
        if v == self.F[i, j]:
            return 1
        return 2
