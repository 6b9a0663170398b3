"""Parsing building blocks: positions, spans, a rewindable stack, tokens, Pratt parsing and precedence climbing."""

__version__ = "0.1.0"
__all__ = ["position", "span", "stack", "token", "pratt_parser", "prec_climber"]