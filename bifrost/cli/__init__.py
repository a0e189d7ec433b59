"""Command-line interface for bifrost."""
