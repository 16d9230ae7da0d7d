"""Marketplace REST backend: users, stores, items and purchase transactions."""

__version__ = "1.0.0"
