"""Wire encoding, packet parsing, errors and connection helpers for the ClickHouse native protocol."""

__version__ = "0.1.0"

__all__ = [
    "binary",
    "block_info",
    "client_info",
    "codes",
    "errors",
    "framing",
    "hosts",
    "parser",
    "retry",
    "sql",
]