"""Immutable tuning values handed to each component at construction time.

Defaults come from :mod:`orbfall.constants`. Nothing in the package reads the
constants module directly once a :class:`GameConfig` exists, so tests and
alternative rule sets simply build their own config.
"""
from __future__ import annotations

from dataclasses import dataclass, field, fields, replace
from typing import Any, Mapping, Tuple

from orbfall import constants
from orbfall.board.grid import MIN_SEED_TYPES
from orbfall.components.symbol import SymbolPalette, SymbolType


# Routes no symbol to recovery; used when the palette tags none.
NO_RECOVERY_SYMBOL = -1


def _default_symbols() -> Tuple[SymbolType, ...]:
    palette = SymbolPalette.from_entries(constants.SYMBOLS, constants.RECOVERY_SYMBOL_ID)
    return tuple(palette.symbols)


@dataclass(frozen=True)
class BoardConfig:
    rows: int = constants.GRID_ROWS
    cols: int = constants.GRID_COLS
    symbols: Tuple[SymbolType, ...] = field(default_factory=_default_symbols)
    min_match_length: int = constants.MIN_MATCH_LENGTH

    def __post_init__(self) -> None:
        if self.rows <= 0 or self.cols <= 0:
            raise ValueError(f"Board dimensions must be positive, got {self.rows}x{self.cols}")
        if len(self.symbols) < MIN_SEED_TYPES:
            raise ValueError(f"Board needs at least {MIN_SEED_TYPES} symbol types, got {len(self.symbols)}")
        # Grid cells store ids 0..n-1 directly.
        symbol_ids = sorted(symbol.id for symbol in self.symbols)
        if symbol_ids != list(range(len(self.symbols))):
            raise ValueError(f"Symbol ids must be 0..{len(self.symbols) - 1}, got {symbol_ids}")
        if self.min_match_length < 2:
            raise ValueError(f"Minimum match length must be at least 2, got {self.min_match_length}")

    @property
    def type_count(self) -> int:
        return len(self.symbols)

    def palette(self) -> SymbolPalette:
        return SymbolPalette(list(self.symbols))


@dataclass(frozen=True)
class CombatConfig:
    size_bonus_factor: float = constants.MATCH_SIZE_BONUS
    combo_scale_factor: float = constants.COMBO_DAMAGE_SCALE
    recovery_symbol: int = constants.RECOVERY_SYMBOL_ID
    min_match_length: int = constants.MIN_MATCH_LENGTH


@dataclass(frozen=True)
class ActorStats:
    hp: int = constants.STARTING_HP
    atk: int = constants.STARTING_ATK
    defense: int = constants.STARTING_DEF
    rcv: int = constants.STARTING_RCV
    extra_lives: int = constants.STARTING_EXTRA_LIVES

    def __post_init__(self) -> None:
        if self.hp <= 0:
            raise ValueError(f"Starting hp must be positive, got {self.hp}")


@dataclass(frozen=True)
class GameConfig:
    board: BoardConfig = field(default_factory=BoardConfig)
    combat: CombatConfig = field(default_factory=CombatConfig)
    player: ActorStats = field(default_factory=ActorStats)
    drag_timeout_ms: int = constants.DRAG_TIMEOUT_MS

    def __post_init__(self) -> None:
        # The palette tag and the combat routing must name the same symbol.
        recovery_ids = self.board.palette().recovery_ids()
        if len(recovery_ids) > 1:
            raise ValueError(f"Only one recovery symbol is supported, got {recovery_ids}")
        tagged = recovery_ids[0] if recovery_ids else None
        palette_ids = {symbol.id for symbol in self.board.symbols}
        routed = self.combat.recovery_symbol if self.combat.recovery_symbol in palette_ids else None
        if tagged != routed:
            raise ValueError(
                f"Palette marks {tagged} as the recovery symbol but combat routes {self.combat.recovery_symbol}"
            )

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "GameConfig":
        """Build a config from plain nested dicts, e.g. parsed JSON.

        Unknown keys raise ``ValueError`` so typos in tuning files are caught.
        """
        sections = {'board': BoardConfig, 'combat': CombatConfig, 'player': ActorStats}
        kwargs: dict[str, Any] = {}
        for key, value in data.items():
            section_cls = sections.get(key)
            if section_cls is not None:
                kwargs[key] = _build_section(section_cls, value)
            elif key == 'drag_timeout_ms':
                kwargs[key] = int(value)
            else:
                raise ValueError(f"Unknown config section '{key}'")
        # A recovery tag in the palette decides the combat routing unless set explicitly.
        if 'recovery_symbol' not in data.get('combat', {}):
            recovery_ids = kwargs.get('board', BoardConfig()).palette().recovery_ids()
            combat = kwargs.get('combat', CombatConfig())
            if recovery_ids:
                kwargs['combat'] = replace(combat, recovery_symbol=recovery_ids[0])
            elif 'board' in kwargs:
                kwargs['combat'] = replace(combat, recovery_symbol=NO_RECOVERY_SYMBOL)
        return cls(**kwargs)


def _build_section(section_cls, values: Mapping[str, Any]):
    known = {f.name for f in fields(section_cls)}
    unknown = set(values) - known
    if unknown:
        raise ValueError(f"Unknown {section_cls.__name__} keys: {sorted(unknown)}")
    values = dict(values)
    if section_cls is BoardConfig and 'symbols' in values:
        values['symbols'] = tuple(
            SymbolType(
                id=int(entry['id']),
                name=entry['name'],
                color=tuple(entry.get('color', (255, 255, 255))),
                recovery=bool(entry.get('recovery', False)),
            )
            for entry in values['symbols']
        )
    return section_cls(**values)
