from PAL4BioInfo.seq_alignment import new_global_alignment, new_local_alignment
from PAL4BioInfo.seq_alignment.formatting import match_line, tabulate
from PAL4BioInfo.seq_io import Sequence

DOMAIN = "MKTAYIAKQRQISFVKSHFSRQLEERLGLIEVQ"


def _regression(b62):
    aln = new_global_alignment(Sequence("q1", "MKFLALF"), Sequence("s1", "MKYLILLF"), b62, -5, -2)
    aln.align()
    return aln


def test_tabulate_columns():
    assert tabulate(["a\tbb\tc", "ccc\td\te"]) == ["a   bb c", "ccc d  e"]


def test_tabulate_blank_line_ends_block():
    out = tabulate(["long cell\tx", "", "a\ty"])
    assert out == ["long cell x", "", "a y"]


def test_tabulate_trailing_cell_not_padded():
    assert tabulate(["a\tb", "a"]) == ["a b", "a"]


def test_match_line(b62):
    assert match_line(b"MF-A", b"MYLI", b62) == "|:  "


def test_regression_rendering(b62):
    expected = (
        "Query   q1 (7 residues)\n"
        "Subject s1 (8 residues)\n"
        "Score   19\n"
        "Errors  3 (1 gap, 2 mismatches)\n"
        "\n"
        "\n"
        "Query   1 MKFLAL-F 7\n"
        "          ||:| | |\n"
        "Subject 1 MKYLILLF 8\n"
        "//"
    )
    assert str(_regression(b62)) == expected


def test_line_wrapping(b62):
    aln = _regression(b62)
    aln.set_line_length(3)
    text = str(aln)
    assert "Query   1 MKF 3" in text
    assert "Query   4 LAL 6" in text
    assert "Query   7 -F 7" in text
    assert "Subject 7 LF 8" in text
    assert text.count("Query   ") == 4
    assert text.endswith("//")


def test_non_positive_line_length_is_ignored(b62):
    aln = _regression(b62)
    aln.set_line_length(0)
    aln.set_line_length(-4)
    assert aln.line_length == 70


def test_singular_forms(dna_matrix):
    aln = new_global_alignment(Sequence("a", "A"), Sequence("c", "C"), dna_matrix, -5, -2)
    aln.align()
    text = str(aln)
    assert "Query   a (1 residue)\n" in text
    assert "Error   1 (0 gaps, 1 mismatch)\n" in text
    assert "Score   -1\n" in text


def test_local_offsets(b62):
    aln = new_local_alignment(Sequence("single", DOMAIN), Sequence("tandem", DOMAIN + "GSGSG" + DOMAIN), b62, -11, -1)
    aln.align()
    assert f"Subject 1 {DOMAIN} 33" in str(aln)
    aln.align()
    text = str(aln)
    assert f"Subject 39 {DOMAIN} 71" in text
    assert f"Query   1  {DOMAIN} 33" in text


def test_subject_length_override(b62):
    aln = _regression(b62)
    aln.set_subject_length(120)
    aln.set_subject_start(10)
    text = str(aln)
    assert "(120 residues)" in text
    assert "Subject 11 MKYLILLF 18" in text
