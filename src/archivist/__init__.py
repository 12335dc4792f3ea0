"""Note archivist: advisory analysis passes over a personal note collection."""

__version__ = "0.1.0"
