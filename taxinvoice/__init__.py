"""Tax invoice computation and pagination engine."""

__version__ = "0.1.0"
