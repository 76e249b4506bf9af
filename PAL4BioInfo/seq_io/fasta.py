"""
Sequence records and FASTA reading and writing
"""
from dataclasses import dataclass
from typing import List, Union


@dataclass
class Sequence:
    """A sequence identifier plus its raw residues"""
    header: str
    data: bytes

    def __post_init__(self):
        if isinstance(self.data, str):
            self.data = self.data.encode("ascii")
        else:
            self.data = bytes(self.data)

    def __len__(self) -> int:
        return len(self.data)

    def __str__(self) -> str:
        return f">{self.header}\n{self.data.decode('ascii')}"


def as_sequence(seq: Union[Sequence, str, bytes], header: str = "") -> Sequence:
    """Wrap plain residues in a Sequence; Sequence objects pass through"""
    if isinstance(seq, Sequence):
        return seq
    return Sequence(header, seq)


def parse_fasta(text: str) -> List[Sequence]:
    """
    Parse FASTA records from a string

    Args:
        text: FASTA formatted text

    Returns:
        List of Sequence, in file order

    Example:
        >>> seqs = parse_fasta(">s1 first\\nACGT\\nAC\\n>s2\\nGG\\n")
        >>> seqs[0].header, seqs[0].data
        ('s1 first', b'ACGTAC')
    """
    sequences = []
    current_name = None
    current_seq = []

    for line in text.splitlines():
        line = line.strip()
        if line.startswith('>'):
            if current_name is not None:
                sequences.append(Sequence(current_name, ''.join(current_seq)))
            current_name = line[1:].strip()
            current_seq = []
        elif line and current_name is not None:
            current_seq.append(line)

    if current_name is not None:
        sequences.append(Sequence(current_name, ''.join(current_seq)))

    return sequences


def read_fasta(filename: str) -> List[Sequence]:
    """
    Read sequences from FASTA format file

    Example:
        >>> query, subject = read_fasta('pair.fasta')
    """
    with open(filename, 'r') as f:
        return parse_fasta(f.read())


def write_fasta(sequences: List[Sequence], filename: str, width: int = 60):
    """
    Write sequences to FASTA format file

    Args:
        sequences: Sequence records, e.g. the two rows of an alignment
        filename: Output file path
        width: Number of residues per line (default 60)

    Example:
        >>> qa, sa = aln.raw_alignment()
        >>> write_fasta([Sequence('query', qa), Sequence('subject', sa)], 'aln.fasta')
    """
    with open(filename, 'w') as f:
        for seq in sequences:
            f.write(f'>{seq.header}\n')
            residues = seq.data.decode('ascii')
            for i in range(0, len(residues), width):
                f.write(residues[i:i+width] + '\n')
