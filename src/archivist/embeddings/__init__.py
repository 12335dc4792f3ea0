"""Embedding providers for notes. Heavy dependencies are imported lazily."""
