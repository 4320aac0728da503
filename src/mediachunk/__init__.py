"""mediachunk: silence-based speech chunking and transcription for media files."""

__version__ = "0.1.0"
