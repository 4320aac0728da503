"""Silence detection and speech segment construction."""
