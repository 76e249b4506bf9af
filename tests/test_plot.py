import matplotlib.pyplot as plt
import pytest

from PAL4BioInfo.seq_alignment import new_global_alignment, new_local_alignment
from PAL4BioInfo.seq_alignment.plot import plot_matrix
from PAL4BioInfo.seq_io import Sequence


@pytest.fixture
def solved(b62):
    aln = new_global_alignment(Sequence("q1", "MKFLALF"), Sequence("s1", "MKYLILLF"), b62, -5, -2)
    aln.align()
    return aln


def test_plot_returns_figure(solved):
    fig = plot_matrix(solved, title="MKFLALF vs MKYLILLF")
    ax = fig.axes[0]
    assert ax.get_title() == "MKFLALF vs MKYLILLF"
    assert ax.get_ylabel() == "q1"
    assert len(ax.lines) == 2
    xs, ys = ax.lines[0].get_data()
    assert (xs[0], ys[0]) == (0, 0)
    assert (xs[-1], ys[-1]) == (8, 7)
    plt.close(fig)


@pytest.mark.parametrize("state", ["E", "F", "G"])
def test_plot_other_states(solved, state):
    fig = plot_matrix(solved, state=state, show_path=False)
    assert len(fig.axes[0].lines) == 0
    plt.close(fig)


def test_unknown_state(solved):
    with pytest.raises(ValueError):
        plot_matrix(solved, state="X")


def test_unsolved_alignment_has_no_path(b62):
    aln = new_local_alignment(Sequence("q", "MK"), Sequence("s", "MK"), b62, -11, -1)
    fig = plot_matrix(aln)
    assert len(fig.axes[0].lines) == 0
    plt.close(fig)


def test_long_sequences_drop_tick_labels(b62):
    aln = new_global_alignment(Sequence("q", "MK" * 40), Sequence("s", "MK" * 35), b62, -5, -2)
    aln.align()
    fig = plot_matrix(aln, max_labels=60)
    labels = [t.get_text() for t in fig.axes[0].get_yticklabels()]
    assert "M" not in labels
    plt.close(fig)
