"""Record and view models."""
