"""chessframe — chess rules core with FEN, SAN, UCI and PGN support,
plus the glue to play games through UCI engines and board surfaces."""

__version__ = "0.1.0"
