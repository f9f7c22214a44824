class BoardError(Exception):
    """Base exception for errors raised by the board core and its adapters."""

    pass


class InvalidFormatError(BoardError):
    """Raised when a snapshot or import payload is not parseable or lacks required keys."""

    pass


class PersistenceError(BoardError):
    """Raised when a persistence adapter cannot read or write its medium."""

    pass


class TileNotFoundError(BoardError, LookupError):
    """Raised when a tile id does not exist in the store."""

    def __init__(self, tile_id: str):
        self.tile_id = tile_id
        super().__init__(f"Tile {tile_id!r} not found")


class PhotoNotFoundError(BoardError, LookupError):
    """Raised when a photo id does not exist in the store."""

    def __init__(self, photo_id: str):
        self.photo_id = photo_id
        super().__init__(f"Photo {photo_id!r} not found")


class TileValidationError(BoardError, ValueError):
    """
    Raised when tile input violates a schema constraint.

    `errors` holds one entry per violated field: {"field": ..., "message": ...}.
    """

    def __init__(self, errors: list[dict[str, str]]):
        self.errors = errors
        fields = ", ".join(e["field"] for e in errors) or "<unknown>"
        super().__init__(f"Invalid tile data ({fields})")
