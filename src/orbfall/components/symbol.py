from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Tuple


@dataclass(frozen=True, slots=True)
class SymbolType:
    """One entry of the orb palette.

    The grid only stores ``id``; name, colour and the recovery tag are for the
    combat layer and any presentation code.
    """
    id: int
    name: str
    color: Tuple[int, int, int] = (255, 255, 255)
    recovery: bool = False


@dataclass(slots=True)
class SymbolPalette:
    """Canonical symbol definitions stored on the board entity."""
    symbols: List[SymbolType] = field(default_factory=list)

    def __post_init__(self) -> None:
        seen: set[int] = set()
        for symbol in self.symbols:
            if symbol.id in seen:
                raise ValueError(f"Duplicate symbol id {symbol.id}")
            seen.add(symbol.id)

    @classmethod
    def from_entries(cls, entries: Iterable[Tuple[int, str, Tuple[int, int, int]]], recovery_id: int) -> "SymbolPalette":
        return cls([SymbolType(id=sid, name=name, color=color, recovery=sid == recovery_id) for sid, name, color in entries])

    def ids(self) -> List[int]:
        return [symbol.id for symbol in self.symbols]

    def by_id(self) -> Dict[int, SymbolType]:
        return {symbol.id: symbol for symbol in self.symbols}

    def get(self, symbol_id: int) -> SymbolType:
        for symbol in self.symbols:
            if symbol.id == symbol_id:
                return symbol
        raise KeyError(f"Symbol {symbol_id} is not in the palette")

    def recovery_ids(self) -> List[int]:
        return [symbol.id for symbol in self.symbols if symbol.recovery]

    def __len__(self) -> int:
        return len(self.symbols)
