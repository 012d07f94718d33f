"""Core business logic for gitpusher, independent of the CLI."""
