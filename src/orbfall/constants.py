GRID_ROWS = 5
GRID_COLS = 6

# Shortest run that counts as a match, horizontally or vertically.
MIN_MATCH_LENGTH = 3

# Symbol palette: id -> (name, fill colour). Ids index the grid cells directly.
SYMBOLS = (
    (0, 'Fire', (232, 69, 69)),
    (1, 'Water', (78, 154, 241)),
    (2, 'Wood', (92, 184, 92)),
    (3, 'Light', (240, 192, 64)),
    (4, 'Dark', (168, 85, 247)),
    (5, 'Heart', (236, 107, 156)),
)
# Matches of this symbol heal the player instead of damaging the monster.
RECOVERY_SYMBOL_ID = 5

# Player starting stats for a new run.
STARTING_HP = 100
STARTING_ATK = 10
STARTING_DEF = 2
STARTING_RCV = 5
STARTING_EXTRA_LIVES = 0

# Each orb beyond the minimum match adds this fraction of the base stat.
MATCH_SIZE_BONUS = 0.25
# Each combo beyond the first adds this fraction to the damage multiplier.
COMBO_DAMAGE_SCALE = 0.25

# Time the player may hold an orb before the drag is forced to end.
DRAG_TIMEOUT_MS = 15000
