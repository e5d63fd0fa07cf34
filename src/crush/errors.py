class OutOfBounds(IndexError):
    """Raised when a position falls outside ``[0, width * width)``."""

    def __init__(self, position, width: int):
        super().__init__(f"position {position!r} outside {width}x{width} grid")
        self.position = position
        self.width = width


class InvalidSwap(ValueError):
    """Raised when a swap is attempted between non-adjacent positions."""

    def __init__(self, src: int, dst: int):
        super().__init__(f"positions {src} and {dst} are not adjacent")
        self.src = src
        self.dst = dst
