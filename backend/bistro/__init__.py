"""Bistro Nouveau table reservation service."""
