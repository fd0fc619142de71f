"""Codec implementations (no imports from the CLI or the dispatcher)."""
