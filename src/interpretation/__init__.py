"""Interpretation framework.

This package threads verbatim records through ordered interpretation
steps while accumulating issues and lineage as a side channel.
"""
