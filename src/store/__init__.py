"""Storage access layer.

This package builds store keys from entity identifiers and runs
single-item and batch CRUD operations against a key-value store.
"""
