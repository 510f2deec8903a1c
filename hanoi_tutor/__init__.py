"""Tower of Hanoi tutor: game state, optimal-move tutor and autoplay."""

__version__ = "0.1.0"
