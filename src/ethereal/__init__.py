"""
Ethereal: a quiet, local-first journal for passing thoughts.

Provides:
- Capture of short thought entries stored on this machine
- Optional AI enrichment (mood, summary, tags, a line of wisdom)
- Filtering, favorites and export of the collection
"""

__version__ = "0.1.0"
