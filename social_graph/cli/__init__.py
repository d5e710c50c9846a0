"""Command line interface (``social-graph``)."""
