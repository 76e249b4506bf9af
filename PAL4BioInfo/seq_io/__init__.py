"""
Sequence Input Module
Sequence records and FASTA reading and writing
"""

from .fasta import (
    Sequence,
    as_sequence,
    parse_fasta,
    read_fasta,
    write_fasta
)

__all__ = [
    "Sequence",
    "as_sequence",
    "parse_fasta",
    "read_fasta",
    "write_fasta"
]
