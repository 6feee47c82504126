"""Core rules engine package for Qwirkle."""

__all__ = [
    "tiles",
    "deck",
    "board",
    "errors",
    "moves",
    "validation",
    "scoring",
    "mechanics",
    "rules_schema",
    "game",
    "encode",
    "store",
    "service",
]
