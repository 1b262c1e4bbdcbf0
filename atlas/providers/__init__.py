"""Concrete adapters for the interfaces in :mod:`atlas.interfaces`."""
