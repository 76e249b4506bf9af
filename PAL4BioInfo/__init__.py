"""
PAL4BioInfo: pairwise alignment toolkit
"""

__version__ = "0.1.0"
