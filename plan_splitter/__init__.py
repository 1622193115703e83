"""
Survey plan splitter.
Recovers the individual survey plans bundled in one search document PDF
and writes each one out as its own PDF.
"""

__version__ = "0.1.0"
