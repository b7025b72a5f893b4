"""photobatch: batch photo upload and thumbnail regeneration."""

__version__ = "0.1.0"
