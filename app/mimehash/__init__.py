"""mimehash -- bidirectional MIME type / BLAKE3 digest lookup service."""

__version__ = "1.0.0"
