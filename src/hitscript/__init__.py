"""hitscript: behavior scripts for squares in a bouncing-ball sequencer."""

__version__ = "0.1.0"
