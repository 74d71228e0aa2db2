"""Services used by the verify use case."""
