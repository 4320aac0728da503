"""Pluggable speech recognition over exported chunks."""
