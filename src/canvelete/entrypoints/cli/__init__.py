"""Command-line entry point for Canvelete."""
