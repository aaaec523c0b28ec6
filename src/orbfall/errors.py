class OutOfBounds(IndexError):
    """Raised when a cell coordinate falls outside the grid."""

    def __init__(self, row: int, col: int, rows: int, cols: int):
        super().__init__(f"Cell ({row}, {col}) outside {rows}x{cols} grid")
        self.row = row
        self.col = col
