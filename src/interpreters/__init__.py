"""Field interpreters.

This package holds the pure per-term interpreters and the chains that
assemble them into one interpreted record per aspect.
"""
