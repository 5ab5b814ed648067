"""Catalog — the in-memory collection of installable templates.

This package provides:
- Models: agents, skills (with scripts) and workflows
- Loading: from a directory, a zip archive, the embedded bundle or the cache
- Selection: narrowing a catalog to requested names
"""
