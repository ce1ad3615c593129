"""Core services of the manifest publication engine."""
