from __future__ import annotations
from dataclasses import dataclass
from typing import Dict, FrozenSet, Iterator, List, Optional, Tuple
import logging

logger = logging.getLogger(__name__)

ALIVE = "x"     # Marker für lebende Zellen (Parsing und Ausgabe)
DEAD = "."      # alle anderen Zeichen werden als tot gelesen, Ausgabe immer "."

# relative Nachbarpositionen (Zeile, Spalte), ohne Wraparound
NEIGH: Tuple[Tuple[int, int], ...] = tuple(
    (dr, dc)
    for dr in (-1, 0, 1)
    for dc in (-1, 0, 1)
    if (dr, dc) != (0, 0)
)


# Exceptions für ungültige Eingaben
class BoardError(ValueError):
    """Allgemeiner Fehler beim Einlesen eines Spielfelds."""


class EmptyBoardError(BoardError):
    """Eingabe enthält keine einzige nicht-leere Zeile."""


class MalformedBoardError(BoardError):
    """Zeilen sind nach dem Entfernen von Whitespace unterschiedlich lang."""


@dataclass(frozen=True)
class Position:
    row: int
    column: int


class Cell:
    """
    Eine Zelle einer Generation.
      - position: fix, wird nie verändert
      - alive: wird nur in der Kopie für die nächste Generation gesetzt
      - neighbours: bis zu 8 Zellen derselben Generation, symmetrisch
    Vergleich über Identität, der Nachbargraph ist zyklisch.
    """

    def __init__(self, position: Position, alive: bool = False):
        self.position = position
        self.alive = alive
        self.neighbours: List[Cell] = []

    def __repr__(self) -> str:
        return f"Cell({self.position.row}, {self.position.column}, alive={self.alive})"

    def add_neighbour(self, other: Optional[Cell]) -> None:
        """Verknüpft beide Zellen in beide Richtungen, ohne Duplikate. None wird ignoriert."""
        if other is None or other is self:
            return
        if other not in self.neighbours:
            self.neighbours.append(other)
        if self not in other.neighbours:
            other.neighbours.append(self)

    def live_neighbour_count(self) -> int:
        return sum(1 for n in self.neighbours if n.alive)

    def evolved_state(self) -> bool:
        """B3/S23, berechnet aus den aktuellen (noch nicht aktualisierten) Nachbarn."""
        n = self.live_neighbour_count()
        if self.alive and (n < 2 or n > 3):
            return False
        if not self.alive and n == 3:
            return True
        return self.alive

    @property
    def marker(self) -> str:
        return ALIVE if self.alive else DEAD


class WorldState:
    """Alle Zellen einer Generation, in Einfügereihenfolge (row-major)."""

    def __init__(self):
        self._cells: List[Cell] = []
        self._by_position: Dict[Position, Cell] = {}

    @property
    def cells(self) -> List[Cell]:
        return list(self._cells)

    def __len__(self) -> int:
        return len(self._cells)

    def __iter__(self) -> Iterator[Cell]:
        return iter(self._cells)

    def add(self, cell: Cell) -> Cell:
        if cell.position in self._by_position:
            raise ValueError(f"Position {cell.position} ist bereits belegt.")
        self._cells.append(cell)
        self._by_position[cell.position] = cell
        return cell

    def cell_at(self, position: Position) -> Optional[Cell]:
        return self._by_position.get(position)

    def cell_matching(self, other: Cell) -> Optional[Cell]:
        return self.cell_at(other.position)

    def clone_deep(self) -> WorldState:
        """
        Strukturelle Kopie: neue Zellen mit gleicher Position/Zustand,
        Nachbarn werden über Positionen auf die neuen Instanzen umgehängt.
        """
        clone = WorldState()
        for cell in self._cells:
            clone.add(Cell(cell.position, cell.alive))
        for cell in self._cells:
            copy = clone.cell_at(cell.position)
            for n in cell.neighbours:
                copy.add_neighbour(clone.cell_at(n.position))
        return clone

    def alive_positions(self) -> FrozenSet[Position]:
        return frozenset(c.position for c in self._cells if c.alive)


class World:
    """Hält genau eine aktuelle Generation, keine Historie."""

    def __init__(self, state: Optional[WorldState] = None):
        self.current_state: WorldState = state if state is not None else WorldState()
        self.generation = 0

    @property
    def cells(self) -> List[Cell]:
        return self.current_state.cells

    def evolve(self) -> World:
        """
        Nächste Generation: Kopie erzeugen, jeder Zustand wird aus der
        unveränderten Originalzelle berechnet, danach Referenz austauschen.
        """
        current = self.current_state
        candidate = current.clone_deep()
        for cell in candidate:
            cell.alive = current.cell_matching(cell).evolved_state()
        self.current_state = candidate
        self.generation += 1
        logger.debug("Generation %d: %d lebende Zellen",
                     self.generation, len(candidate.alive_positions()))
        return self


# Parsing
def rows_from_text(text: str) -> List[str]:
    """
    Zerlegt den Text in Zeilen, entfernt jeglichen Whitespace und leere Zeilen.
    Wirft EmptyBoardError / MalformedBoardError.
    """
    rows = ["".join(line.split()) for line in text.splitlines()]
    rows = [row for row in rows if row]
    if not rows:
        raise EmptyBoardError("Spielfeld enthält keine Zeilen.")
    width = len(rows[0])
    for i, row in enumerate(rows, start=1):
        if len(row) != width:
            raise MalformedBoardError(
                f"Zeile {i} hat Länge {len(row)}, erwartet {width}."
            )
    return rows


class RectangularWorld(World):
    """Endliches, rechteckiges Feld mit 8er-Nachbarschaft, ohne Wraparound."""

    def __init__(self, initial_state: str, alive_marker: str = ALIVE):
        super().__init__()
        rows = rows_from_text(initial_state)
        self.height = len(rows)
        self.width = len(rows[0])
        self._populate(rows, alive_marker)
        logger.debug("Spielfeld %dx%d eingelesen, %d lebende Zellen",
                     self.height, self.width, len(self.current_state.alive_positions()))

    def _populate(self, rows: List[str], alive_marker: str) -> None:
        state = self.current_state
        for r, row in enumerate(rows):
            for c, ch in enumerate(row):
                cell = state.add(Cell(Position(r, c), alive=(ch == alive_marker)))
                # unten/rechts existiert noch nicht -> None, die spätere Zelle verlinkt zurück
                for dr, dc in NEIGH:
                    if r + dr < 0 or c + dc < 0:
                        continue
                    cell.add_neighbour(state.cell_at(Position(r + dr, c + dc)))

    def to_text(self, world_state: Optional[WorldState] = None) -> str:
        state = world_state if world_state is not None else self.current_state
        out = []
        for i, cell in enumerate(state):
            if i % self.width == 0:
                out.append("\n")
            elif i:
                out.append(" ")
            out.append(cell.marker)
        out.append("\n")
        return "".join(out)

    def __str__(self) -> str:
        return self.to_text()


# Generator, unendliche Generationen
def generations(world: World) -> Iterator[WorldState]:
    while True:
        yield world.current_state
        world.evolve()
