"""Installer core — models, services, engine and use cases."""
