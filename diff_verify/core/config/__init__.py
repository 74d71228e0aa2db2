"""Settings file loading."""
