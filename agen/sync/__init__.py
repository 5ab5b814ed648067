"""Sync — keep a destination in line with the catalog without clobbering local edits.

This package provides the primitives for:
- Fingerprints: short content hashes and the per-destination record of what was written
- Reports: what an install/update added, updated or skipped
- The engine: per-file classification into add / update / skip
"""
