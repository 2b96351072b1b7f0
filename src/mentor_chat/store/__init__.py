"""Persistence for resources and instruction templates."""
