"""Grid state, match detection and cascade resolution."""

from .grid import EMPTY, BoardMode, Cell, GravityMove, Grid, Position, SymbolGenerator
from .match_finder import MatchGroup, MatchStrategy, find_matches, run_length_matcher, sort_groups
from .resolution import (
    GravityResult,
    ResolutionEngine,
    ResolutionPhase,
    ResolutionResult,
    ResolvedGroup,
)
