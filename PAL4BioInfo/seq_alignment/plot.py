"""
Dynamic programming matrix plotting (heatmap + traceback path)
"""
from typing import List, Optional, Tuple

import matplotlib.pyplot as plt
import numpy as np

_STATES = ("E", "F", "G", "V")


# ---------- helpers ----------
def _tick_labels(data: bytes, limit: int) -> List[str]:
    if len(data) > limit:
        return []
    return [""] + [chr(c) for c in data]


# ---------- main API ----------
def plot_matrix(
    aln,
    state: str = "V",
    figsize: Tuple[int, int] = (8, 8),
    show_path: bool = True,
    title: Optional[str] = None,
    cmap: str = "viridis",
    max_labels: int = 60,
) -> plt.Figure:
    """
    Draw one state of the DP matrix as heatmap.

    - Query runs down the rows, subject along the columns.
    - Boundary cells at -inf are left blank.
    - The current alignment is drawn on top when show_path is set.
    """
    if state not in _STATES:
        raise ValueError(f"Unknown state: {state}")

    dp = aln.programming_matrix()
    values = np.ma.masked_invalid(getattr(dp, state))

    fig, ax = plt.subplots(figsize=figsize)
    im = ax.imshow(values, cmap=cmap, aspect="auto", interpolation="nearest")
    fig.colorbar(im, ax=ax, shrink=0.8, label=state)

    qlabels = _tick_labels(aln.query.data, max_labels)
    slabels = _tick_labels(aln.subject.data, max_labels)
    if qlabels:
        ax.set_yticks(range(len(qlabels)))
        ax.set_yticklabels(qlabels, fontsize=8)
    if slabels:
        ax.set_xticks(range(len(slabels)))
        ax.set_xticklabels(slabels, fontsize=8)
    ax.xaxis.tick_top()
    ax.set_ylabel(aln.query.header or "query")
    ax.set_xlabel(aln.subject.header or "subject")

    qa, _ = aln.raw_alignment()
    if show_path and len(qa) > 0:
        path = aln.path()
        ys = [p[0] for p in path]
        xs = [p[1] for p in path]
        ax.plot(xs, ys, "r-", lw=1.5)
        ax.plot(xs[-1], ys[-1], "ro", ms=4)

    if title:
        ax.set_title(title, fontsize=12, fontweight="bold")

    plt.tight_layout()
    return fig
