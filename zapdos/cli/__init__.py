"""Command-line interface for zapdos."""
