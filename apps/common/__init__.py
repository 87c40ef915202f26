"""Shared building blocks for the ledger apps: error taxonomy and period helpers."""
