"""Adapters — one destination shape per consumer tool.

Each adapter renders a catalog into the files its tool expects and hands
them to the sync engine. The registry decides which adapter a project uses.
"""
