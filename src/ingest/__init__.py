"""Verbatim record ingestion and interpreted record output.

This package reads verbatim JSONL sources into ``VerbatimRecord`` values
and writes interpreted aspect records back out as JSONL.
"""
