"""Fight diagnostics observers."""

from core.diagnostics.fight_logger import FightLogger, FightObserver, NullFightObserver, SideStats

__all__ = ["FightLogger", "FightObserver", "NullFightObserver", "SideStats"]
