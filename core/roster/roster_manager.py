"""Persistent roster of bugs with fight records.

The roster keeps ``roster_size`` bugs.  Matches are drawn by weighted random
selection favouring bugs with fewer fights.  When a file path is given the
roster is saved as JSON when it is created or loaded.  Fight results and
bred bugs only mark it dirty and never touch the disk; the owner flushes
later (the server's auto-save task, or the headless runner at the end).
Write failures are logged and otherwise ignored so a bad disk never stops
the fights.
"""

from __future__ import annotations

import json
import logging
import random as pyrandom
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

from core.config.server import DEFAULT_ROSTER_SIZE
from core.exceptions import GeneticsError, PersistenceError, RosterError
from core.genetics.genome import Genome
from core.math_utils import pick
from core.roster.protocol import RosterBug

logger = logging.getLogger(__name__)

ID_ALPHABET = "0123456789abcdefghijklmnopqrstuvwxyz"
ID_LENGTH = 9

# Variety rule for a freshly generated roster
VARIETY_BUGS = 6
VARIETY_ATTEMPTS = 20
VARIETY_MIN_WEAPONS = 4
VARIETY_MIN_MOBILITIES = 3


def selection_weight(bug: RosterBug) -> float:
    """Newer bugs (fewer fights) are slightly more likely to be picked."""
    return max(1.0, 10 - bug.total_fights * 0.5)


def _weighted_index(rng: pyrandom.Random, weights: Sequence[float], exclude: Optional[int] = None) -> int:
    total = sum(w for i, w in enumerate(weights) if i != exclude)
    r = rng.random() * total
    fallback = next(i for i in range(len(weights)) if i != exclude)
    for i, weight in enumerate(weights):
        if i == exclude:
            continue
        r -= weight
        if r <= 0:
            return i
    return fallback


class RosterManager:
    """In-memory roster with optional JSON file persistence.

    Args:
        path: JSON file to load from and save to; ``None`` keeps it in memory
        roster_size: Minimum number of bugs kept in the roster
        rng: Random source for genomes, names, ids and match selection
    """

    def __init__(
        self,
        path: Optional[Union[str, Path]] = None,
        *,
        roster_size: int = DEFAULT_ROSTER_SIZE,
        rng: Optional[pyrandom.Random] = None,
    ) -> None:
        if roster_size < 2:
            raise RosterError("roster_size must be at least 2")
        self.path = Path(path) if path else None
        self.roster_size = roster_size
        self.rng = rng or pyrandom.Random()
        self.bugs: List[RosterBug] = []
        self.dirty = False
        self.load()

    def __len__(self) -> int:
        return len(self.bugs)

    # =========================================================================
    # Persistence
    # =========================================================================

    def load(self) -> None:
        """Load the roster file (or generate a fresh roster) and top it up."""
        if self.path is not None and self.path.exists():
            try:
                self.bugs = self.read_file()
                logger.info("Loaded roster with %d bugs from %s", len(self.bugs), self.path)
            except PersistenceError as e:
                logger.error("Error loading roster: %s", e, exc_info=True)
                self.generate_roster()
        else:
            self.generate_roster()

        while len(self.bugs) < self.roster_size:
            self.add_new_bug()

    def read_file(self) -> List[RosterBug]:
        """Parse the roster file.

        Raises:
            PersistenceError: the file is unreadable or holds a bad record
        """
        try:
            with open(self.path) as f:
                data = json.load(f)
            return [RosterBug.from_dict(entry) for entry in data.get("bugs", [])]
        except (OSError, ValueError, KeyError, TypeError, AttributeError, GeneticsError) as e:
            raise PersistenceError(f"cannot read roster from {self.path}: {e}") from e

    def capture_state_for_save(self) -> Optional[Dict[str, Any]]:
        """Snapshot the roster for writing if it has unsaved changes.

        Cheap and run on the simulation's thread; clears the dirty flag so
        changes made while the snapshot is being written mark it again.
        """
        if self.path is None or not self.dirty:
            return None
        self.dirty = False
        return self._snapshot()

    def _snapshot(self) -> Dict[str, Any]:
        return {
            "bugs": [bug.to_dict() for bug in self.bugs],
            "savedAt": datetime.now(timezone.utc).isoformat(),
        }

    def write_snapshot(self, data: Dict[str, Any]) -> bool:
        """Write a captured snapshot to disk. Safe to run in a worker thread."""
        if self.path is None:
            return False
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.path, "w") as f:
                json.dump(data, f, indent=2)
            return True
        except (OSError, TypeError) as e:
            logger.error("Error saving roster to %s: %s", self.path, e, exc_info=True)
            self.dirty = True
            return False

    def save(self) -> bool:
        """Write the whole roster now. Returns False when nothing was written."""
        if self.path is None:
            return False
        self.dirty = False
        return self.write_snapshot(self._snapshot())

    def flush(self) -> bool:
        """Write the roster only if it has unsaved changes."""
        data = self.capture_state_for_save()
        if data is None:
            return False
        return self.write_snapshot(data)

    # =========================================================================
    # Generation
    # =========================================================================

    def generate_id(self) -> str:
        return "".join(pick(self.rng, ID_ALPHABET) for _ in range(ID_LENGTH))

    def _new_bug(self, genome: Genome) -> RosterBug:
        return RosterBug(id=self.generate_id(), name=genome.get_name(self.rng), genome=genome)

    def generate_roster(self) -> None:
        """Replace the roster with ``roster_size`` fresh random bugs.

        The first few bugs are re-rolled (a bounded number of times) until
        they spread across weapons and mobility types.
        """
        logger.info("Generating new roster...")
        self.bugs = []
        used_weapons = set()
        used_mobilities = set()

        for i in range(self.roster_size):
            genome = Genome.random(self.rng)
            attempts = 1
            while (
                i < VARIETY_BUGS
                and attempts < VARIETY_ATTEMPTS
                and (
                    (genome.weapon in used_weapons and len(used_weapons) < VARIETY_MIN_WEAPONS)
                    or (genome.mobility in used_mobilities and len(used_mobilities) < VARIETY_MIN_MOBILITIES)
                )
            ):
                genome = Genome.random(self.rng)
                attempts += 1

            used_weapons.add(genome.weapon)
            used_mobilities.add(genome.mobility)
            self.bugs.append(self._new_bug(genome))

        self.save()
        logger.info("Generated roster with %d bugs", len(self.bugs))

    def add_new_bug(self) -> RosterBug:
        bug = self._new_bug(Genome.random(self.rng))
        self.bugs.append(bug)
        self.save()
        return bug

    def breed_new_bug(self, parent_a_id: str, parent_b_id: str) -> RosterBug:
        """Add a child bred from two roster bugs."""
        parent_a = self.get_bug(parent_a_id)
        parent_b = self.get_bug(parent_b_id)
        if parent_a is None or parent_b is None:
            missing = parent_a_id if parent_a is None else parent_b_id
            raise RosterError(f"Unknown bug id: {missing}")
        if parent_a.id == parent_b.id:
            raise RosterError("A bug cannot breed with itself")

        child = self._new_bug(parent_a.genome.breed(parent_b.genome, rng=self.rng))
        self.bugs.append(child)
        self.dirty = True
        logger.info("Bred %s from %s x %s", child.name, parent_a.name, parent_b.name)
        return child

    # =========================================================================
    # Queries and records
    # =========================================================================

    def get_bug(self, bug_id: str) -> Optional[RosterBug]:
        return next((bug for bug in self.bugs if bug.id == bug_id), None)

    def select_fighters(self) -> Tuple[RosterBug, RosterBug]:
        """Pick two different bugs, weighted toward the less experienced."""
        if len(self.bugs) < 2:
            raise RosterError("Not enough bugs in roster")

        weights = [selection_weight(bug) for bug in self.bugs]
        first = _weighted_index(self.rng, weights)
        second = _weighted_index(self.rng, weights, exclude=first)
        return self.bugs[first], self.bugs[second]

    def record_win(self, bug_id: str) -> None:
        bug = self.get_bug(bug_id)
        if bug is not None:
            bug.wins += 1
            self.dirty = True

    def record_loss(self, bug_id: str) -> None:
        bug = self.get_bug(bug_id)
        if bug is not None:
            bug.losses += 1
            self.dirty = True

    def get_roster(self) -> List[Dict[str, Any]]:
        """Client rows for every bug."""
        return [bug.to_client() for bug in self.bugs]
