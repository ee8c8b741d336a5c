"""Tests for the fighter AI state machine and drives."""

import pytest

from core.config.fighter import AGGRESSION_FLOOR, CAUTION_CEILING
from core.fighter import AIState, AnimState, Drives
from tests.fakes import ScriptedRandom


class TestStalemateBreaker:
    @pytest.mark.parametrize("state", [AIState.CIRCLING, AIState.RETREATING])
    def test_long_stalemate_forces_aggressive(self, make_fighter, state):
        f = make_fighter()
        f.ai_state = state
        f.no_engagement_timer = 500
        f.update_drives()
        assert f.ai_state == AIState.AGGRESSIVE
        assert f.ai_state_timer == 0

    def test_cornered_bug_stays_aggressive_through_the_tick(self, make_fighter):
        f = make_fighter("left", instinct=100, rng=ScriptedRandom(default=0.0))
        f.x = f.arena.min_x + 30
        opponent = make_fighter("right")
        opponent.x, opponent.y, opponent.z = f.x + 40, f.y, f.z
        f.ai_state = AIState.CIRCLING
        f.no_engagement_timer = 500

        f.update_drives()
        f.update_ai(opponent)

        assert f.ai_state == AIState.AGGRESSIVE

    def test_hurt_flyer_stays_aggressive_through_the_tick(self, make_fighter):
        f = make_fighter("left", mobility="winged", rng=ScriptedRandom(default=0.0))
        opponent = make_fighter("right")
        opponent.x, opponent.y, opponent.z = f.x + 60, f.y, f.z
        f.hp = int(f.max_hp * 0.3)
        f.drives.caution = 0.85
        f.ai_state = AIState.RETREATING
        f.no_engagement_timer = 500

        f.update_drives()
        f.update_ai(opponent)

        assert f.ai_state == AIState.AGGRESSIVE

    def test_cornered_bug_escapes_without_stalemate(self, make_fighter):
        f = make_fighter("left", instinct=100, rng=ScriptedRandom(default=0.0))
        f.x = f.arena.min_x + 30
        opponent = make_fighter("right")
        opponent.x, opponent.y, opponent.z = f.x + 40, f.y, f.z
        f.update_ai(opponent)
        assert f.ai_state == AIState.RETREATING

    def test_stalemate_pressure_raises_aggression(self, make_fighter):
        f = make_fighter()
        before = f.drives.aggression
        f.no_engagement_timer = 400
        f.update_drives()
        assert f.drives.aggression > before

    def test_no_pressure_before_threshold(self, make_fighter):
        f = make_fighter()
        f.no_engagement_timer = 10
        f.update_drives()
        assert f.ai_state == AIState.AGGRESSIVE
        assert f.no_engagement_timer == 11

    def test_attack_attempt_resets_engagement_timer(self, make_fighter):
        f = make_fighter()
        f.no_engagement_timer = 300
        f.on_attack_attempted()
        assert f.no_engagement_timer == 0


class TestStateMachine:
    def test_stun_enters_stunned_then_returns_to_aggressive(self, make_fighter):
        f = make_fighter("left")
        opponent = make_fighter("right")
        f.stun_timer = 10
        f.update_ai(opponent)
        assert f.ai_state == AIState.STUNNED

        f.stun_timer = 0
        f.update_ai(opponent)
        assert f.ai_state == AIState.AGGRESSIVE

    def test_dead_fighter_does_not_think(self, make_fighter):
        f = make_fighter("left")
        opponent = make_fighter("right")
        f.hp = 0
        f.update_ai(opponent)
        assert f.move_timer == 0
        assert f.vx == 0

    def test_attacking_fighter_does_not_steer(self, make_fighter):
        f = make_fighter("left")
        opponent = make_fighter("right")
        f.set_state(AnimState.ATTACK)
        f.update_ai(opponent)
        assert f.move_timer == 0

    def test_emergency_retreat_for_hurt_flyer(self, make_fighter):
        rng = ScriptedRandom(default=0.5)
        f = make_fighter("left", mobility="winged", rng=rng)
        opponent = make_fighter("right")
        opponent.x, opponent.y, opponent.z = f.x + 60, f.y, f.z
        f.hp = int(f.max_hp * 0.3)
        f.drives.caution = 0.85
        rng.push(0.0)
        f.update_ai(opponent)
        assert f.ai_state == AIState.RETREATING

    def test_no_emergency_retreat_for_ground_bug(self, make_fighter):
        f = make_fighter("left", rng=ScriptedRandom(default=0.0))
        opponent = make_fighter("right")
        opponent.x, opponent.y, opponent.z = f.x + 60, f.y, f.z
        f.hp = int(f.max_hp * 0.3)
        f.drives.caution = 0.85
        f.update_ai(opponent)
        assert f.ai_state == AIState.AGGRESSIVE

    def test_aggressive_ground_bug_closes_distance(self, make_fighter):
        f = make_fighter("left")
        opponent = make_fighter("right")
        f.update_ai(opponent)
        assert f.vx > 0

    def test_facing_turns_toward_opponent(self, make_fighter):
        f = make_fighter("right")
        opponent = make_fighter("left")
        assert not f.facing_right
        f.update_ai(opponent)
        assert not f.facing_right

    def test_stuck_detector_pushes_forward(self, make_fighter):
        f = make_fighter()
        f.ai_state = AIState.CIRCLING
        f.stuck_timer = 45
        f._update_stuck_detector()
        assert f.ai_state == AIState.AGGRESSIVE
        assert f.stuck_timer == 30
        assert (f.vx, f.vz) != (0, 0)

    def test_stuck_detector_disabled(self, make_fighter):
        f = make_fighter("left", stuck_detector_enabled=False)
        opponent = make_fighter("right")
        f.stuck_timer = 100
        f.update_ai(opponent)
        assert f.stuck_timer == 100


class TestDrives:
    def test_fury_sets_baselines(self):
        drives = Drives.from_stats(fury=100, instinct=0)
        assert drives.aggression == pytest.approx(0.7)
        assert drives.caution == pytest.approx(0.3)
        assert drives.adapt_rate == pytest.approx(0.02)

    def test_clamp_keeps_fighters_from_going_passive(self):
        drives = Drives(aggression=0.0, caution=1.0, adapt_rate=0.02)
        drives.clamp()
        assert drives.aggression == AGGRESSION_FLOOR
        assert drives.caution == CAUTION_CEILING

    def test_drift_moves_toward_baseline(self):
        drives = Drives(aggression=1.0, caution=0.0, adapt_rate=0.02)
        drives.drift(0.5)
        assert drives.aggression < 1.0
        assert drives.caution > 0.0

    def test_furious_bug_gets_angrier_when_hit(self):
        drives = Drives.from_stats(fury=90, instinct=50)
        before = drives.aggression
        drives.on_damage_taken(0.9)
        assert drives.aggression > before

    def test_calm_bug_gets_warier_when_hit(self):
        drives = Drives.from_stats(fury=20, instinct=50)
        before = drives.caution
        drives.on_damage_taken(0.2)
        assert drives.caution > before

    def test_exhaustion_raises_caution(self):
        drives = Drives(aggression=0.5, caution=0.5, adapt_rate=0.02)
        drives.apply_exhaustion(0.0)
        assert drives.caution > 0.5
        assert drives.aggression < 0.5

    def test_landing_a_hit_resets_engagement(self, make_fighter):
        f = make_fighter()
        f.no_engagement_timer = 100
        before = f.drives.aggression
        f.on_hit_landed(10)
        assert f.no_engagement_timer == 0
        assert f.drives.aggression > before
