"""Command line interface for redshiftnet."""
