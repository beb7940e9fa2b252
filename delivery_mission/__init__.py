"""Delivery mission progress tracking."""
