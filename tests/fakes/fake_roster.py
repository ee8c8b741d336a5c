"""In-memory roster collaborator that records notifications."""

import logging
from typing import Any, Dict, List, Sequence, Tuple

from core.exceptions import RosterError
from core.roster.protocol import RosterBug

logger = logging.getLogger(__name__)


class FakeRoster:
    """Always matches the first two bugs; can be told to fail on record calls.

    Attributes:
        wins, losses: Bug ids passed to ``record_win`` / ``record_loss``
        fail: When True, record calls raise ``OSError`` like a broken disk
    """

    def __init__(self, bugs: Sequence[RosterBug], *, fail: bool = False) -> None:
        self.bugs: List[RosterBug] = list(bugs)
        self.fail = fail
        self.wins: List[str] = []
        self.losses: List[str] = []
        self.selections = 0

    def select_fighters(self) -> Tuple[RosterBug, RosterBug]:
        if len(self.bugs) < 2:
            raise RosterError("Not enough bugs in roster")
        self.selections += 1
        return self.bugs[0], self.bugs[1]

    def record_win(self, bug_id: str) -> None:
        if self.fail:
            raise OSError("roster store unavailable")
        self.wins.append(bug_id)

    def record_loss(self, bug_id: str) -> None:
        if self.fail:
            raise OSError("roster store unavailable")
        self.losses.append(bug_id)

    def get_roster(self) -> List[Dict[str, Any]]:
        return [bug.to_client() for bug in self.bugs]
