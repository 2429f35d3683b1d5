"""marketctl — marketplace backend with an order and escrow lifecycle engine."""

__version__ = "0.1.0"
