"""Fight diagnostics: an observer that tallies per-fight statistics and logs them.

The simulation reports attacks, feints, per-tick positions and the result to a
``FightObserver``.  ``FightLogger`` keeps counters per fighter side, warns
about stalemates (both bugs holding far apart) and prints summaries.
``NullFightObserver`` does nothing and is what tests usually pass in.

Observers are read-only: nothing they do may change simulation state.
"""

from __future__ import annotations

import logging
import math
from collections import Counter
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Protocol

from core.config.simulation import TICK_RATE
from core.fighter.fighter import Fighter, attack_range

logger = logging.getLogger(__name__)

SIDES = ("left", "right")

STALEMATE_RANGE_FACTOR = 2.5
STALEMATE_WARNING_TICKS = 300
STALEMATE_EXTENDED_TICKS = 600
STALEMATE_REPEAT_TICKS = 900
SUMMARY_INTERVAL_TICKS = 300


class FightObserver(Protocol):
    """Receives fight diagnostics from the simulation."""

    def reset(self, name1: str, name2: str) -> None: ...

    def log_attack(
        self,
        side: str,
        attacker_name: str,
        target_name: str,
        *,
        hit: bool,
        damage: int = 0,
        dodged: bool = False,
        crit: bool = False,
        momentum: float = 0.0,
        dodge_type: Optional[str] = None,
    ) -> None: ...

    def log_feint(self, side: str, attacker_name: str, target_name: str, result: str) -> None: ...

    def track_tick(self, left: Fighter, right: Fighter, tick: int) -> None: ...

    def log_fight_end(self, winner: int, left: Fighter, right: Fighter) -> None: ...


class NullFightObserver:
    """Observer that ignores everything."""

    def reset(self, name1: str, name2: str) -> None:
        pass

    def log_attack(self, side: str, attacker_name: str, target_name: str, **details: Any) -> None:
        pass

    def log_feint(self, side: str, attacker_name: str, target_name: str, result: str) -> None:
        pass

    def track_tick(self, left: Fighter, right: Fighter, tick: int) -> None:
        pass

    def log_fight_end(self, winner: int, left: Fighter, right: Fighter) -> None:
        pass


@dataclass
class SideStats:
    """Counters for one fighter side."""

    attacks: int = 0
    hits: int = 0
    dodges: int = 0
    damage: int = 0
    feints: int = 0
    feints_read: int = 0
    feint_baits: int = 0
    time_in_state: Counter = field(default_factory=Counter)

    @property
    def accuracy(self) -> float:
        return self.hits / self.attacks if self.attacks else 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "attacks": self.attacks,
            "hits": self.hits,
            "dodges": self.dodges,
            "damage": self.damage,
            "feints": self.feints,
            "feintsRead": self.feints_read,
            "feintBaits": self.feint_baits,
            "timeInState": dict(self.time_in_state),
        }


@dataclass(frozen=True)
class StateTransition:
    tick: int
    side: str
    from_state: str
    to_state: str


class FightLogger:
    """Logging fight observer keyed by fighter side ("left"/"right")."""

    def __init__(self, *, enabled: bool = True) -> None:
        self.enabled = enabled
        self.names: Dict[str, str] = {}
        self.stats: Dict[str, SideStats] = {}
        self.state_transitions: List[StateTransition] = []
        self.last_engagement = 0
        self.stalemate_ticks = 0
        self.start_tick: Optional[int] = None
        self.last_tick = 0
        self._last_ai_states: Dict[str, Optional[str]] = {}
        self.reset("", "")

    def reset(self, name1: str, name2: str) -> None:
        """Clear all counters for a new match."""
        self.names = {"left": name1, "right": name2}
        self.stats = {side: SideStats() for side in SIDES}
        self.state_transitions = []
        self.last_engagement = 0
        self.stalemate_ticks = 0
        self.start_tick = None
        self.last_tick = 0
        self._last_ai_states = {side: None for side in SIDES}
        if self.enabled and name1:
            logger.info("=" * 60)
            logger.info("FIGHT START: %s vs %s", name1, name2)
            logger.info("=" * 60)

    @staticmethod
    def _other(side: str) -> str:
        return "right" if side == "left" else "left"

    def log_attack(
        self,
        side: str,
        attacker_name: str,
        target_name: str,
        *,
        hit: bool,
        damage: int = 0,
        dodged: bool = False,
        crit: bool = False,
        momentum: float = 0.0,
        dodge_type: Optional[str] = None,
    ) -> None:
        stats = self.stats[side]
        stats.attacks += 1
        self.last_engagement = 0
        self.stalemate_ticks = 0

        if hit:
            stats.hits += 1
            stats.damage += damage
            if self.enabled:
                logger.info(
                    "  %s HITS %s for %d damage%s [momentum: %.2f]",
                    attacker_name,
                    target_name,
                    damage,
                    " (CRIT!)" if crit else "",
                    momentum,
                )
        elif dodged:
            self.stats[self._other(side)].dodges += 1
            if self.enabled:
                logger.info("  %s DODGES %s's attack (%s)", target_name, attacker_name, dodge_type or "dodge")
        elif self.enabled:
            logger.info("  %s MISSES %s", attacker_name, target_name)

    def log_feint(self, side: str, attacker_name: str, target_name: str, result: str) -> None:
        stats = self.stats[side]
        stats.feints += 1
        if result == "read":
            stats.feints_read += 1
        elif result in ("dodge-bait", "flinch"):
            stats.feint_baits += 1
        if self.enabled:
            logger.info("  %s FEINTS at %s: %s", attacker_name, target_name, result)

    def track_tick(self, left: Fighter, right: Fighter, tick: int) -> None:
        """Sample both fighters once per fighting tick."""
        if self.start_tick is None:
            self.start_tick = tick
        self.last_tick = tick

        for side, fighter in (("left", left), ("right", right)):
            state = fighter.ai_state.value
            self.stats[side].time_in_state[state] += 1
            previous = self._last_ai_states[side]
            if previous is not None and previous != state:
                self.state_transitions.append(StateTransition(tick, side, previous, state))
                if self.enabled:
                    logger.debug("  %s: %s -> %s", fighter.name, previous, state)
            self._last_ai_states[side] = state

        dist = math.sqrt((right.x - left.x) ** 2 + (right.y - left.y) ** 2 + (right.z - left.z) ** 2)
        reach = attack_range(left, right)

        self.last_engagement += 1
        if dist > reach * STALEMATE_RANGE_FACTOR:
            self.stalemate_ticks += 1
        else:
            self.stalemate_ticks = max(0, self.stalemate_ticks - 2)

        if self.enabled:
            if self.stalemate_ticks == STALEMATE_WARNING_TICKS:
                logger.warning(
                    "STALEMATE WARNING: bugs distant for %ds (dist: %.0f, range: %.0f)",
                    STALEMATE_WARNING_TICKS // TICK_RATE,
                    dist,
                    reach,
                )
                self._log_fighter_states(left, right)
            if self.stalemate_ticks == STALEMATE_EXTENDED_TICKS:
                logger.warning("EXTENDED STALEMATE: %ds without engagement", STALEMATE_EXTENDED_TICKS // TICK_RATE)
                self._log_diagnosis(left, right, dist, reach)
            if self.stalemate_ticks > 0 and self.stalemate_ticks % STALEMATE_REPEAT_TICKS == 0:
                logger.warning("STALEMATE CONTINUES: %ds", self.stalemate_ticks // TICK_RATE)
                self._log_diagnosis(left, right, dist, reach)

            if (tick - self.start_tick) > 0 and (tick - self.start_tick) % SUMMARY_INTERVAL_TICKS == 0:
                self._log_periodic_summary(left, right, dist)

    def stalemate_causes(self, left: Fighter, right: Fighter) -> List[str]:
        """Heuristic explanations for why the two bugs are not engaging."""
        issues = []
        if left.ai_state == right.ai_state and left.ai_state.value in ("retreating", "circling"):
            issues.append(f"Both bugs {left.ai_state.value}")
        if left.stamina_ratio < 0.2 or right.stamina_ratio < 0.2:
            issues.append("Low stamina causing passive play")
        if left.drives.caution > 0.7 and right.drives.caution > 0.7:
            issues.append("Both bugs very cautious")
        for flyer, other in ((left, right), (right, left)):
            if flyer.is_flying and not flyer.grounded and not other.is_flying:
                issues.append("Flyer staying airborne vs grounded opponent")
        return issues

    def _log_fighter_states(self, *fighters: Fighter) -> None:
        for f in fighters:
            if f.is_flying:
                mobility = "landed" if f.grounded else "flying"
            elif f.on_wall:
                mobility = f"wall:{f.wall_side}"
            else:
                mobility = "ground" if f.grounded else "air"
            logger.info(
                "     %s: HP %.0f%% | Stam %.0f%% | %s | %s @ (%.0f, %.0f, %.0f)",
                f.name,
                f.hp_ratio * 100,
                f.stamina_ratio * 100,
                f.ai_state.value,
                mobility,
                f.x,
                f.y,
                f.z,
            )

    def _log_diagnosis(self, left: Fighter, right: Fighter, dist: float, reach: float) -> None:
        logger.info("  STALEMATE DIAGNOSIS:")
        for side, f in (("left", left), ("right", right)):
            state_time = self.stats[side].time_in_state
            total = sum(state_time.values()) or 1
            breakdown = " ".join(f"{state}:{ticks / total * 100:.0f}%" for state, ticks in state_time.items())
            logger.info(
                "     %s: HP %d/%d | Stamina %.0f/%d | AI %s | agg=%.0f%% caut=%.0f%% | stun %d",
                f.name,
                f.hp,
                f.max_hp,
                f.stamina,
                f.max_stamina,
                f.ai_state.value,
                f.drives.aggression * 100,
                f.drives.caution * 100,
                f.stun_timer,
            )
            logger.info("       State time: %s", breakdown)
        logger.info("     Distance: %.0f (attack range: %.0f)", dist, reach)
        issues = self.stalemate_causes(left, right)
        if issues:
            logger.info("     Likely causes: %s", "; ".join(issues))

    def _log_periodic_summary(self, left: Fighter, right: Fighter, dist: float) -> None:
        elapsed = self.elapsed_seconds
        logger.info("  [%.0fs] %s vs %s | Dist: %.0f", elapsed, left.name, right.name, dist)
        for side, f in (("left", left), ("right", right)):
            s = self.stats[side]
            logger.info("     %s: HP %d/%d | Atk %d (%d hits, %d dmg)", f.name, f.hp, f.max_hp, s.attacks, s.hits, s.damage)

    @property
    def elapsed_seconds(self) -> float:
        if self.start_tick is None:
            return 0.0
        return (self.last_tick - self.start_tick) / TICK_RATE

    def log_fight_end(self, winner: int, left: Fighter, right: Fighter) -> None:
        if not self.enabled:
            return
        elapsed = self.elapsed_seconds
        logger.info("=" * 60)
        if winner == 0:
            logger.info("DRAW after %.1fs", elapsed)
        else:
            winner_name, loser_name = (left.name, right.name) if winner == 1 else (right.name, left.name)
            logger.info("WINNER: %s defeats %s in %.1fs", winner_name, loser_name, elapsed)

        logger.info("Final Stats:")
        for side, f in (("left", left), ("right", right)):
            s = self.stats[side]
            logger.info(
                "  %s: %d attacks, %d hits (%.0f%%), %d total damage, %d feints (%d baited)",
                f.name,
                s.attacks,
                s.hits,
                s.accuracy * 100,
                s.damage,
                s.feints,
                s.feint_baits,
            )
        logger.info("=" * 60)

    def summary(self) -> Dict[str, Any]:
        """Plain-dict view of the current counters."""
        return {
            "names": dict(self.names),
            "stats": {side: s.to_dict() for side, s in self.stats.items()},
            "stalemateTicks": self.stalemate_ticks,
            "lastEngagement": self.last_engagement,
            "transitions": len(self.state_transitions),
        }
