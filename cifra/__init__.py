"""cifra: chord-chart editor with a key-aware music-theory engine."""

__version__ = "0.1.0"
