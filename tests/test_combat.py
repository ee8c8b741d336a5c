"""Combat resolution under a scripted random source.

Each scenario places two fighters at a fixed distance and feeds the resolver
an exact sequence of draws, so the hit/dodge/miss branch and the damage
number are fully determined.

Draw order for an attack: feint roll, physical dodge roll, [dodge
direction...], d100 hit, d100 dodge, d6 damage, d100 crit, cooldown jitter.
"""

import pytest

from core.combat import CombatResolver, compute_damage, knockback_force
from core.combat.resolver import base_cooldown, dodge_chance, feint_chance
from core.config.arena import ARENA
from core.events import EventLog
from core.fighter import AnimState
from tests.fakes import ScriptedRandom

NO_FEINT = 0.99
NO_DODGE = 0.99


def _place(fighter, x, z=0.0):
    fighter.x = x
    fighter.y = ARENA.min_y + fighter.sprite_size / 2
    fighter.z = z
    fighter.vx = fighter.vy = fighter.vz = 0.0


def _texts(events):
    return [e.text for e in events.events if e.kind == "commentary"]


@pytest.fixture
def duel(make_fighter):
    """Two plain bugs 40 units apart, attacker on the left facing right."""
    attacker = make_fighter("left", "Attacker")
    target = make_fighter("right", "Target")
    _place(attacker, 0)
    _place(target, 40)
    return attacker, target


def _resolver(values):
    rng = ScriptedRandom(values)
    events = EventLog()
    events.begin_tick(1)
    return CombatResolver(rng, events), rng, events


class TestAttack:
    def test_plain_hit(self, duel):
        attacker, target = duel
        resolver, rng, events = _resolver([NO_FEINT, NO_DODGE, 0.5, 0.1, 0.5, 0.9, 0.0])

        resolver.process_combat(attacker, target, "left")

        # (50 + 50) // 10 + d6(4) = 14, no modifiers
        assert target.hp == target.max_hp - 14
        assert target.state == AnimState.HIT
        assert target.stun_timer == 15
        assert target.is_knocked_back
        assert attacker.state == AnimState.ATTACK
        assert attacker.stamina == attacker.max_stamina - 15
        assert attacker.attack_cooldown == pytest.approx(38)
        assert rng.remaining == 0

        hits = [e for e in events.events if e.kind == "hit"]
        assert len(hits) == 1
        assert hits[0].damage == 14
        assert hits[0].attacker == "Attacker"
        assert hits[0].is_crit is False

    def test_backstab_shell_and_crit_stack_in_order(self, make_fighter):
        attacker = make_fighter("left", "Attacker")
        target = make_fighter("right", "Target", defense="shell")
        # Behind the target (which faces left) and mostly along Z
        _place(target, 0, z=0)
        _place(attacker, 10, z=-30)
        resolver, rng, events = _resolver([NO_FEINT, NO_DODGE, 0.5, 0.1, 0.5, 0.0, 0.0])

        resolver.process_combat(attacker, target, "left")

        # 14 -> flank x1.25 = 17 -> backstab x1.15 = 19 -> shell -2 = 17 -> crit x1.5 = 25
        assert target.hp == target.max_hp - 25
        assert target.stun_timer == 25
        texts = _texts(events)
        assert texts.index("BACKSTAB!") < texts.index("CRITICAL HIT!")
        assert rng.remaining == 0

    def test_rng_miss(self, duel):
        attacker, target = duel
        resolver, rng, events = _resolver([NO_FEINT, NO_DODGE, 0.0, 0.99, 0.0])

        resolver.process_combat(attacker, target, "left")

        assert target.hp == target.max_hp
        assert "Attacker misses!" in _texts(events)
        assert attacker.stun_timer == 0
        assert attacker.attack_cooldown == pytest.approx(38)
        assert rng.remaining == 0

    def test_physical_dodge_skips_hit_roll(self, duel):
        attacker, target = duel
        # Dodge succeeds; backward scatter draws two jitter values; then miss penalty jitter
        resolver, rng, events = _resolver([NO_FEINT, 0.0, 0.5, 0.5, 0.0])

        resolver.process_combat(attacker, target, "left")

        assert target.hp == target.max_hp
        # Low-instinct scatter uses the raw attack direction
        assert target.vx == pytest.approx(-4.2)
        assert "Target dodges!" in _texts(events)
        assert not [e for e in events.events if e.kind == "hit"]
        assert attacker.stun_timer == 4
        assert attacker.attack_cooldown == pytest.approx(38 + 8)
        assert rng.remaining == 0

    def test_stunned_target_cannot_physically_dodge(self, duel):
        attacker, target = duel
        target.stun_timer = 10
        resolver, rng, _ = _resolver([NO_FEINT, 0.5, 0.1, 0.5, 0.9, 0.0])

        resolver.process_combat(attacker, target, "left")

        assert target.hp == target.max_hp - 14
        assert rng.remaining == 0

    def test_out_of_range_does_nothing(self, duel):
        attacker, target = duel
        target.x = 200
        resolver, rng, events = _resolver([])

        resolver.process_combat(attacker, target, "left")

        assert attacker.state == AnimState.IDLE
        assert len(events) == 0
        assert rng.calls == 0

    def test_cooldown_ticks_down_without_going_negative(self, duel):
        attacker, target = duel
        attacker.attack_cooldown = 2
        resolver, rng, _ = _resolver([])

        resolver.process_combat(attacker, target, "left")
        assert attacker.attack_cooldown == 1
        assert rng.calls == 0

    @pytest.mark.parametrize("blocker", ["stunned", "busy", "dead"])
    def test_attacker_must_be_ready(self, duel, blocker):
        attacker, target = duel
        if blocker == "stunned":
            attacker.stun_timer = 5
        elif blocker == "busy":
            attacker.set_state(AnimState.HIT)
        else:
            attacker.hp = 0
        resolver, rng, _ = _resolver([])

        resolver.process_combat(attacker, target, "left")
        assert rng.calls == 0
        assert target.hp == target.max_hp

    def test_exhausted_attacker_holds(self, duel):
        attacker, target = duel
        attacker.stamina = 4
        resolver, rng, _ = _resolver([])

        resolver.process_combat(attacker, target, "left")
        assert attacker.state == AnimState.IDLE
        assert rng.calls == 0

    def test_killing_blow(self, duel):
        attacker, target = duel
        target.hp = 5
        resolver, _, events = _resolver([NO_FEINT, NO_DODGE, 0.5, 0.1, 0.5, 0.9, 0.0])

        resolver.process_combat(attacker, target, "left")

        assert target.hp <= 0
        assert not target.is_alive
        assert target.state == AnimState.DEATH
        assert "Target is defeated!" in _texts(events)


class TestStatusEffects:
    def test_fangs_poison_on_third_face(self, make_fighter):
        attacker = make_fighter("left", "Attacker", weapon="fangs")
        target = make_fighter("right", "Target")
        _place(attacker, 0)
        _place(target, 40)
        resolver, rng, events = _resolver([NO_FEINT, NO_DODGE, 0.5, 0.1, 0.5, 0.9, 0.99, 0.0])

        resolver.process_combat(attacker, target, "left")

        assert target.poisoned == 4
        assert "Target is poisoned!" in _texts(events)
        assert rng.remaining == 0

    def test_toxic_defense_reflects_damage(self, make_fighter):
        attacker = make_fighter("left", "Attacker")
        target = make_fighter("right", "Target", defense="toxic", bulk=75)
        _place(attacker, 0)
        _place(target, 40)
        resolver, _, events = _resolver([NO_FEINT, NO_DODGE, 0.5, 0.1, 0.5, 0.9, 0.0])

        resolver.process_combat(attacker, target, "left")

        assert attacker.hp == attacker.max_hp - 3
        assert "Attacker takes 3 toxic damage!" in _texts(events)

    def test_toxic_reflect_can_kill_attacker(self, make_fighter):
        attacker = make_fighter("left", "Attacker")
        target = make_fighter("right", "Target", defense="toxic", bulk=100)
        _place(attacker, 0)
        _place(target, 40)
        attacker.hp = 2
        resolver, _, events = _resolver([NO_FEINT, NO_DODGE, 0.5, 0.1, 0.5, 0.9, 0.0])

        resolver.process_combat(attacker, target, "left")

        assert attacker.hp == 0
        assert attacker.state == AnimState.DEATH
        assert "Attacker is defeated!" in _texts(events)


class TestPoison:
    def test_single_stack_deals_two_damage_once(self, make_fighter):
        fighter = make_fighter()
        fighter.poisoned = 1
        resolver, _, events = _resolver([])

        resolver.process_poison(fighter, 29)
        assert fighter.hp == fighter.max_hp

        resolver.process_poison(fighter, 30)
        assert fighter.hp == fighter.max_hp - 2
        assert fighter.poisoned == 0
        assert events.events[-1].is_poison

        resolver.process_poison(fighter, 60)
        assert fighter.hp == fighter.max_hp - 2

    def test_poison_can_kill(self, make_fighter):
        fighter = make_fighter(name="Victim")
        fighter.poisoned = 2
        fighter.hp = 1
        resolver, _, events = _resolver([])

        resolver.process_poison(fighter, 30)

        assert not fighter.is_alive
        assert fighter.state == AnimState.DEATH
        assert "Victim succumbs to poison!" in _texts(events)


class TestFeint:
    def _feint(self, duel, values):
        attacker, target = duel
        resolver, rng, events = _resolver(values)
        resolver.process_combat(attacker, target, "left")
        return attacker, target, rng, events

    def test_read(self, duel):
        attacker, target, rng, events = self._feint(duel, [0.0, 0.0, 0.0, 0.5])
        assert attacker.state == AnimState.FEINT
        assert attacker.attack_cooldown == pytest.approx(38 + 7.5)
        assert not attacker.feint_success
        assert "Target reads the feint!" in _texts(events)
        assert rng.remaining == 0

    def test_dodge_bait(self, duel):
        attacker, target, rng, events = self._feint(duel, [0.0, 0.5, 0.99, 0.0, 0.9])
        assert attacker.feint_cooldown == 120
        assert attacker.attack_cooldown == 11
        assert attacker.feint_success
        assert target.vz != 0
        feints = [e for e in events.events if e.kind == "feint"]
        assert feints[0].result == "dodge-bait"
        assert rng.remaining == 0

    def test_flinch(self, duel):
        attacker, target, rng, events = self._feint(duel, [0.0, 0.0, 0.99, 0.99])
        assert target.stun_timer == 8
        assert attacker.attack_cooldown == 15
        assert "Target flinches!" in _texts(events)
        assert rng.remaining == 0

    def test_feint_never_damages(self, duel):
        attacker, target, _, events = self._feint(duel, [0.0, 0.0, 0.99, 0.99])
        assert target.hp == target.max_hp
        assert not [e for e in events.events if e.kind == "hit"]

    def test_feint_on_stunned_target_is_wasted(self, duel):
        attacker, target = duel
        target.stun_timer = 5
        resolver, _, events = _resolver([0.0, 0.0])
        resolver.process_combat(attacker, target, "left")
        assert attacker.attack_cooldown == pytest.approx(38 * 0.7)
        assert not [e for e in events.events if e.kind == "feint"]


class TestFormulas:
    def test_base_cooldown_faster_is_shorter(self, make_fighter):
        assert base_cooldown(make_fighter(speed=100)) == 28
        assert base_cooldown(make_fighter(speed=10)) == 46

    def test_dodge_chance_floor(self, make_fighter):
        assert dodge_chance(make_fighter(instinct=10), 1.0) == pytest.approx(0.05)

    def test_dodge_chance_bonuses(self, make_fighter):
        plain = dodge_chance(make_fighter(), 0.0)
        camo = dodge_chance(make_fighter(defense="camouflage"), 0.0)
        flyer = dodge_chance(make_fighter(mobility="winged"), 0.0)
        assert camo == pytest.approx(plain + 0.12)
        assert flyer == pytest.approx(plain + 0.15)

    def test_feint_chance(self, make_fighter):
        assert feint_chance(make_fighter()) == pytest.approx(0.1075)

    def test_momentum_boosts_damage(self, make_fighter):
        attacker = make_fighter("left")
        target = make_fighter("right")
        _place(attacker, 0)
        _place(target, 40)
        slow = compute_damage(attacker, target, 40, 0, 0.0, ScriptedRandom([0.5, 0.9]))
        fast = compute_damage(attacker, target, 40, 0, 1.0, ScriptedRandom([0.5, 0.9]))
        assert slow.damage == 14
        assert fast.damage == 18
        assert fast.charging and not slow.charging

    def test_dive_bonus_for_diving_flyer(self, make_fighter):
        attacker = make_fighter("left", mobility="winged")
        target = make_fighter("right")
        _place(target, 40)
        attacker.x, attacker.z = 0, 0
        attacker.y = target.y + 100
        attacker.is_diving = True
        result = compute_damage(attacker, target, 40, 0, 0.0, ScriptedRandom([0.5, 0.9]))
        assert result.dive
        assert result.damage == 21

    def test_damage_floor_is_one(self, make_fighter):
        attacker = make_fighter("left", bulk=10, fury=10)
        target = make_fighter("right", defense="shell", bulk=100)
        _place(attacker, 0)
        _place(target, 40)
        result = compute_damage(attacker, target, 40, 0, 0.0, ScriptedRandom([0.0, 0.99]))
        assert result.damage == 1
        assert result.shell_reduced

    def test_shell_resists_knockback(self, make_fighter):
        attacker = make_fighter("left")
        plain = make_fighter("right")
        shelled = make_fighter("right", defense="shell")
        assert knockback_force(attacker, shelled, 10, False) == pytest.approx(
            knockback_force(attacker, plain, 10, False) * 0.7
        )

    def test_crit_knocks_back_harder(self, make_fighter):
        attacker = make_fighter("left")
        target = make_fighter("right")
        assert knockback_force(attacker, target, 10, True) > knockback_force(attacker, target, 10, False)
