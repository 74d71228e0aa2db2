"""Use cases - the top-level operations the CLI exposes."""
