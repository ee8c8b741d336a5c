"""What the simulation needs from a roster of bugs."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Protocol, Tuple, runtime_checkable

from core.genetics.genome import Genome


def _utc_now() -> str:
    return datetime.now(timezone.utc).isoformat()


@dataclass
class RosterBug:
    """One persistent roster entry and its fight record."""

    id: str
    name: str
    genome: Genome
    wins: int = 0
    losses: int = 0
    created_at: str = field(default_factory=_utc_now)

    @property
    def total_fights(self) -> int:
        return self.wins + self.losses

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "genome": self.genome.to_dict(),
            "wins": self.wins,
            "losses": self.losses,
            "createdAt": self.created_at,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RosterBug":
        return cls(
            id=str(data["id"]),
            name=str(data["name"]),
            genome=Genome.from_dict(data["genome"]),
            wins=int(data.get("wins", 0)),
            losses=int(data.get("losses", 0)),
            created_at=str(data.get("createdAt") or _utc_now()),
        )

    def to_client(self) -> Dict[str, Any]:
        g = self.genome
        return {
            "id": self.id,
            "name": self.name,
            "stats": g.stats(),
            "weapon": g.weapon,
            "defense": g.defense,
            "mobility": g.mobility,
            "wins": self.wins,
            "losses": self.losses,
            "genome": g.to_dict(),
        }


@runtime_checkable
class RosterProvider(Protocol):
    """Roster collaborator consumed by ``Simulation``.

    ``record_win``/``record_loss`` are notifications: the simulation does not
    depend on them succeeding.
    """

    def select_fighters(self) -> Tuple[RosterBug, RosterBug]: ...

    def record_win(self, bug_id: str) -> None: ...

    def record_loss(self, bug_id: str) -> None: ...

    def get_roster(self) -> List[Dict[str, Any]]: ...
