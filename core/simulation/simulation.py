"""Match orchestration: the countdown -> fighting -> victory loop.

``Simulation.update()`` advances exactly one tick and is driven by an external
fixed-rate timer (or called in a tight loop when headless).  It never blocks
and performs no I/O; roster notifications are fire-and-forget.

Per fighting tick the order is fixed:

1. animation state for both fighters
2. physics for both, then wall impact reporting
3. fighter-fighter separation
4. drives for both
5. AI for both (each reads the other)
6. combat left -> right, then right -> left
7. poison for both
8. diagnostics sample, then end the fight if either fighter died
"""

from __future__ import annotations

import logging
import random as pyrandom
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Iterator, List, Optional

from core.combat.resolver import CombatResolver
from core.config.combat import INITIAL_COOLDOWN_BASE, INITIAL_COOLDOWN_JITTER
from core.config.simulation import DRAW
from core.config.simulation_config import SimulationConfig
from core.diagnostics.fight_logger import FightLogger, FightObserver, NullFightObserver
from core.events.game_events import (
    AMBER,
    GREY,
    ORANGE,
    RED,
    YELLOW,
    EventLog,
    FightEndEvent,
    WallImpactEvent,
)
from core.fighter.fighter import Fighter
from core.fighter.physics import resolve_fighter_collision
from core.fighter.view import AnimState
from core.roster.protocol import RosterBug, RosterProvider
from core.simulation.odds import calculate_odds

logger = logging.getLogger(__name__)

SLAM_STUN = 20
CRASH_STUN = 10


class Phase(str, Enum):
    COUNTDOWN = "countdown"
    FIGHTING = "fighting"
    VICTORY = "victory"


@dataclass
class FighterPair:
    """The two fighters of the current match, by side."""

    left: Fighter
    right: Fighter

    def __iter__(self) -> Iterator[Fighter]:
        yield self.left
        yield self.right


@dataclass(frozen=True)
class FightResult:
    """Outcome of one finished fight."""

    fight_number: int
    winner: int
    winner_name: Optional[str]
    left_name: str
    right_name: str
    ticks: int


class Simulation:
    """Runs an endless series of one-on-one fights between roster bugs.

    Args:
        roster: Supplies fighters and receives win/loss notifications
        config: Timing and feature toggles
        rng: Random source for every decision in the match
        observer: Fight diagnostics; defaults to a ``FightLogger`` when
            ``config.fight_logging`` is on, otherwise a no-op observer
    """

    def __init__(
        self,
        roster: RosterProvider,
        *,
        config: Optional[SimulationConfig] = None,
        rng: Optional[pyrandom.Random] = None,
        observer: Optional[FightObserver] = None,
    ) -> None:
        self.roster = roster
        self.config = config or SimulationConfig()
        self.rng = rng or pyrandom.Random()
        if observer is None:
            observer = FightLogger() if self.config.fight_logging else NullFightObserver()
        self.observer: FightObserver = observer

        self.phase = Phase.COUNTDOWN
        self.countdown = self.config.countdown_seconds
        self.tick = 0
        self.fight_number = 0
        self.victory_timer = 0
        self.winner: Optional[int] = None
        self.fight_start_tick = 0
        self.results: List[FightResult] = []

        self.event_log = EventLog()
        self.resolver = CombatResolver(self.rng, self.event_log, self.observer)

        self.bugs: List[RosterBug] = []
        self.bug_records: List[Dict[str, int]] = []
        self.fighters: Optional[FighterPair] = None

        self.setup_next_fight()

    # =========================================================================
    # Match lifecycle
    # =========================================================================

    def setup_next_fight(self) -> None:
        """Pick two bugs and put them in the arena for a new countdown.

        Raises:
            RosterError: the roster cannot supply two fighters
        """
        self.fight_number += 1
        self.phase = Phase.COUNTDOWN
        self.countdown = self.config.countdown_seconds
        self.winner = None

        bug1, bug2 = self.roster.select_fighters()
        self.bugs = [bug1, bug2]
        self.bug_records = [
            {"wins": bug1.wins, "losses": bug1.losses},
            {"wins": bug2.wins, "losses": bug2.losses},
        ]

        detector = self.config.stuck_detector_enabled
        self.fighters = FighterPair(
            left=Fighter(bug1.genome, "left", bug1.name, rng=self.rng, stuck_detector_enabled=detector),
            right=Fighter(bug2.genome, "right", bug2.name, rng=self.rng, stuck_detector_enabled=detector),
        )
        for fighter in self.fighters:
            fighter.attack_cooldown = INITIAL_COOLDOWN_BASE + self.rng.random() * INITIAL_COOLDOWN_JITTER

        self.observer.reset(bug1.name, bug2.name)
        self.event_log.commentary(f"FIGHT #{self.fight_number} - Place your bets!", YELLOW)
        logger.debug("Fight #%d set up: %s vs %s", self.fight_number, bug1.name, bug2.name)

    def start_fight(self) -> None:
        self.phase = Phase.FIGHTING
        self.fight_start_tick = self.tick
        self.event_log.commentary("FIGHT!", RED)

    def end_fight(self) -> None:
        """Declare the result, notify the roster and start the victory display."""
        self.phase = Phase.VICTORY
        self.victory_timer = self.config.victory_ticks

        left, right = self.fighters
        if left.is_alive and not right.is_alive:
            self.winner = 1
            self._declare_winner(left, winner_index=0)
        elif right.is_alive and not left.is_alive:
            self.winner = 2
            self._declare_winner(right, winner_index=1)
        else:
            self.winner = DRAW
            self.event_log.commentary("DRAW!", GREY)

        self.observer.log_fight_end(self.winner, left, right)
        self.event_log.add(FightEndEvent(winner=self.winner, tick=self.tick))

        self.results.append(
            FightResult(
                fight_number=self.fight_number,
                winner=self.winner,
                winner_name=None if self.winner == DRAW else self.bugs[self.winner - 1].name,
                left_name=left.name,
                right_name=right.name,
                ticks=self.tick - self.fight_start_tick,
            )
        )

    def _declare_winner(self, fighter: Fighter, winner_index: int) -> None:
        loser_index = 1 - winner_index
        fighter.set_state(AnimState.VICTORY)
        self.event_log.commentary(f"{fighter.name} WINS!", YELLOW)

        self.bug_records[winner_index]["wins"] += 1
        self.bug_records[loser_index]["losses"] += 1
        self._notify_roster("record_win", self.bugs[winner_index].id)
        self._notify_roster("record_loss", self.bugs[loser_index].id)

    def _notify_roster(self, method: str, bug_id: str) -> None:
        try:
            getattr(self.roster, method)(bug_id)
        except Exception:
            logger.warning("Roster %s(%s) failed; keeping in-memory result", method, bug_id, exc_info=True)

    # =========================================================================
    # Tick
    # =========================================================================

    def update(self) -> None:
        """Advance the simulation by one tick."""
        self.tick += 1
        self.event_log.begin_tick(self.tick)

        if self.phase == Phase.COUNTDOWN:
            if self.tick % self.config.tick_rate == 0:
                self.countdown -= 1
                if 0 < self.countdown <= 3:
                    self.event_log.commentary(f"{self.countdown}...", RED)
                if self.countdown <= 0:
                    self.start_fight()
        elif self.phase == Phase.FIGHTING:
            self.update_fight()
        elif self.phase == Phase.VICTORY:
            # The loser keeps falling and the winner keeps bouncing
            for fighter in self.fighters:
                fighter.update_state()
                fighter.update_physics()
                fighter.take_wall_impact()
            self.victory_timer -= 1
            if self.victory_timer <= 0:
                self.setup_next_fight()

    def update_fight(self) -> None:
        left, right = self.fighters

        left.update_state()
        right.update_state()

        left.update_physics()
        right.update_physics()

        self.report_wall_impact(left)
        self.report_wall_impact(right)

        resolve_fighter_collision(left, right)

        left.update_drives()
        right.update_drives()

        left.update_ai(right)
        right.update_ai(left)

        self.resolver.process_combat(left, right, "left")
        self.resolver.process_combat(right, left, "right")

        self.resolver.process_poison(left, self.tick)
        self.resolver.process_poison(right, self.tick)

        self.observer.track_tick(left, right, self.tick)

        if not left.is_alive or not right.is_alive:
            self.end_fight()

    def report_wall_impact(self, fighter: Fighter) -> None:
        impact = fighter.take_wall_impact()
        if impact is None:
            return
        self.event_log.add(
            WallImpactEvent(
                x=fighter.x,
                y=fighter.y,
                name=fighter.name,
                velocity=impact.velocity,
                wall_side=impact.wall_side,
                stun_applied=impact.stun_applied,
                tick=self.tick,
            )
        )
        if impact.stun_applied >= SLAM_STUN:
            self.event_log.commentary(f"{fighter.name} SLAMMED into the wall!", ORANGE)
        elif impact.stun_applied >= CRASH_STUN:
            self.event_log.commentary(f"{fighter.name} crashes into the wall!", AMBER)

    # =========================================================================
    # Snapshots
    # =========================================================================

    def calculate_odds(self) -> Dict[str, Any]:
        left, right = self.fighters
        return calculate_odds(left.power_rating(), right.power_rating(), self.config.house_edge)

    @property
    def events(self) -> List[Dict[str, Any]]:
        return self.event_log.to_list()

    def get_state(self) -> Dict[str, Any]:
        """Client snapshot of the current tick. Does not mutate anything."""
        return {
            "phase": self.phase.value,
            "countdown": self.countdown,
            "tick": self.tick,
            "fightNumber": self.fight_number,
            "fighters": [fighter.to_state() for fighter in self.fighters],
            "bugs": [bug.genome.to_dict() for bug in self.bugs],
            "bugNames": [bug.name for bug in self.bugs],
            "bugRecords": [dict(record) for record in self.bug_records],
            "odds": self.calculate_odds(),
            "events": self.event_log.to_list(),
            "winner": self.winner,
        }

    def get_roster(self) -> List[Dict[str, Any]]:
        return self.roster.get_roster()

    # =========================================================================
    # Headless running
    # =========================================================================

    def run_fights(self, fights: int, max_ticks: Optional[int] = None) -> List[FightResult]:
        """Tick as fast as possible until ``fights`` more fights have finished.

        Args:
            fights: Number of fights to complete
            max_ticks: Optional hard stop on the number of ticks run

        Returns:
            The results of the fights finished during this call
        """
        already = len(self.results)
        target = already + fights
        ticks = 0
        while len(self.results) < target:
            if max_ticks is not None and ticks >= max_ticks:
                logger.warning("Stopped after %d ticks with %d/%d fights done", ticks, len(self.results) - already, fights)
                break
            self.update()
            ticks += 1
        return self.results[already:]
