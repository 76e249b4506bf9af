"""
Text rendering of alignments and score tables
"""
from typing import List

GAP = ord("-")
DEFAULT_LINE_LENGTH = 70


def tabulate(lines: List[str], padding: int = 1) -> List[str]:
    """
    Align tab-separated cells into columns (elastic tabstops)

    Every cell terminated by a tab belongs to a column; the text after the
    last tab is left as is. A column block is a run of consecutive lines
    that all have that column, and its width is the widest cell plus
    `padding`. Lines without the column (e.g. blank lines) end the block.
    """
    rows = [line.split("\t") for line in lines]
    widths = [[0] * (len(r) - 1) for r in rows]
    ncols = max((len(r) - 1 for r in rows), default=0)

    for col in range(ncols):
        k = 0
        while k < len(rows):
            if len(rows[k]) - 1 <= col:
                k += 1
                continue
            start = k
            while k < len(rows) and len(rows[k]) - 1 > col:
                k += 1
            w = max(len(rows[r][col]) for r in range(start, k)) + padding
            for r in range(start, k):
                widths[r][col] = w

    out = []
    for row, w in zip(rows, widths):
        cells = [cell.ljust(cw) for cell, cw in zip(row[:-1], w)]
        out.append("".join(cells) + row[-1])
    return out


def _plural(n: int, word: str, suffix: str = "s") -> str:
    return word if n == 1 else word + suffix


def match_line(query: bytes, subject: bytes, matrix) -> str:
    """
    '|' for identical residues, ':' for a positive-scoring pair,
    ' ' for gaps and everything else
    """
    marks = []
    for qc, sc in zip(query, subject):
        m = " "
        if qc != GAP and sc != GAP:
            if qc == sc:
                m = "|"
            elif matrix.score(qc, sc) > 0:
                m = ":"
        marks.append(m)
    return "".join(marks)


def format_alignment(aln) -> str:
    """
    Render an alignment as header block plus wrapped query/match/subject
    lines, terminated by '//'

    Example output:

        Query   q1 (7 residues)
        Subject s1 (8 residues)
        Score   19
        Errors  3 (1 gap, 2 mismatches)


        Query   1 MKFLAL-F 7
                  ||:| | |
        Subject 1 MKYLILLF 8
        //
    """
    qa, sa = aln.raw_alignment()
    ql, sl = aln.query_length, aln.subject_length
    gaps, mismatches = aln.gaps(), aln.mismatches()
    errors = gaps + mismatches

    lines = [
        f"Query\t{aln.query.header}\t({ql} {_plural(ql, 'residue')})",
        f"Subject\t{aln.subject.header}\t({sl} {_plural(sl, 'residue')})",
        "Score\t%g" % aln.score(),
        f"{_plural(errors, 'Error')}\t{errors} "
        f"({gaps} {_plural(gaps, 'gap')}, {mismatches} {_plural(mismatches, 'mismatch', 'es')})",
    ]

    ll = aln.line_length
    qs, ss = aln.query_start, aln.subject_start
    for i in range(0, len(qa), ll):
        q_chunk = qa[i:i + ll]
        s_chunk = sa[i:i + ll]

        nr = len(q_chunk) - q_chunk.count(GAP)
        first = qs + 1 if nr > 0 else qs
        q_line = f"Query\t{first}\t{q_chunk.decode('ascii')}\t{qs + nr}"
        qs += nr

        nr = len(s_chunk) - s_chunk.count(GAP)
        first = ss + 1 if nr > 0 else ss
        s_line = f"Subject\t{first}\t{s_chunk.decode('ascii')}\t{ss + nr}"
        ss += nr

        lines.extend(["", "", q_line, "\t\t" + match_line(q_chunk, s_chunk, aln.matrix), s_line])

    return "\n".join(tabulate(lines)) + "\n//"
