"""Concrete implementations of the interfaces in ``memstash.interfaces``."""
