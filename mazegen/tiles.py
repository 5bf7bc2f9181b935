# Cell constants centralized for modular imports
PASSAGE = 0
WALL = 1

# Orthogonal moves as (d_row, d_col): north, south, west, east
DIRECTIONS = ((-1, 0), (1, 0), (0, -1), (0, 1))

__all__ = ["PASSAGE", "WALL", "DIRECTIONS"]
