"""Core building blocks: settings, database primitives and dependencies."""
