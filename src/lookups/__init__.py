"""Shared read-only lookups.

This package holds the vocabulary service and attribution metadata
store consumed by interpretation workers. Each is acquired once per
worker lifecycle and closed at teardown.
"""
