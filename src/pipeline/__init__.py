"""Record interpretation orchestration.

This package owns the worker lifecycle: acquiring shared lookups once,
running aspect chains over verbatim records in parallel and releasing
the lookups exactly once.
"""
