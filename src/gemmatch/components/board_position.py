from dataclasses import dataclass

@dataclass(slots=True)
class BoardPosition:
    """Cell binding of a placed token. Waiting tokens carry no BoardPosition."""
    row: int
    col: int
