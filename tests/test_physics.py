"""Tests for fighter physics: walls, jumps, collisions and dead bodies."""

import math

import pytest

from core.config.arena import ARENA
from core.fighter import AnimState, resolve_fighter_collision


class TestWallStun:
    def test_plain_fighter_stun_is_three_per_velocity(self, make_fighter):
        f = make_fighter()
        impact = f.apply_wall_stun(12, "left")
        assert f.wall_stun_timer == 36
        assert f.stun_timer == 36
        assert impact.stun_applied == 36
        assert f.last_wall_impact.stun_applied == 36
        assert f.last_wall_impact.wall_side == "left"

    @pytest.mark.parametrize(
        "overrides, expected",
        [
            ({"mobility": "wallcrawler"}, 10),
            ({"defense": "shell"}, 25),
            ({"mobility": "winged"}, 46),
        ],
    )
    def test_stun_scaling(self, make_fighter, overrides, expected):
        f = make_fighter(**overrides)
        assert f.apply_wall_stun(12, "right").stun_applied == expected

    def test_keeps_longer_existing_stun(self, make_fighter):
        f = make_fighter()
        f.stun_timer = 50
        f.apply_wall_stun(2, "back")
        assert f.stun_timer == 50
        assert f.wall_stun_timer == 6

    def test_take_wall_impact_drains_record(self, make_fighter):
        f = make_fighter()
        f.apply_wall_stun(12, "front")
        assert f.take_wall_impact().wall_side == "front"
        assert f.take_wall_impact() is None

    def test_knocked_back_into_wall(self, make_fighter):
        f = make_fighter()
        half = f.sprite_size / 2
        f.x = ARENA.min_x + half + 1
        f.vx = -10
        f.is_knocked_back = True
        f.update_physics()
        impact = f.take_wall_impact()
        assert impact is not None
        assert impact.wall_side == "left"
        assert impact.stun_applied == 30
        assert f.x == ARENA.min_x + half
        assert f.vx > 0

    def test_soft_wall_contact_does_not_stun(self, make_fighter):
        f = make_fighter()
        f.x = ARENA.min_x + f.sprite_size / 2 + 1
        f.vx = -3
        f.is_knocked_back = True
        f.update_physics()
        assert f.take_wall_impact() is None
        assert f.stun_timer == 0

    def test_wallcrawler_attaches_instead_of_bouncing(self, make_fighter):
        f = make_fighter(mobility="wallcrawler")
        f.x = ARENA.max_x - f.sprite_size / 2 - 1
        f.y = ARENA.min_y + f.sprite_size / 2
        f.vx = 5
        f.update_physics()
        assert f.on_wall
        assert f.wall_side == "right"
        assert f.vx == 0


class TestJump:
    def test_jump_from_ground(self, make_fighter):
        f = make_fighter()
        f.y = ARENA.min_y + f.sprite_size / 2
        stamina = f.stamina
        assert f.jump()
        assert f.vy == pytest.approx(f.jump_power)
        assert f.stamina == stamina - 5
        assert not f.grounded

    def test_jump_respects_cooldown(self, make_fighter):
        f = make_fighter()
        assert f.jump()
        f.grounded = True
        assert not f.jump()

    def test_leg_style_scales_jump_power(self, make_fighter):
        plain = make_fighter(leg_style="insect")
        hopper = make_fighter(leg_style="grasshopper")
        assert hopper.jump_power == pytest.approx(plain.jump_power * 1.5)

    def test_wall_jump_pushes_off(self, make_fighter):
        f = make_fighter(mobility="wallcrawler")
        f.on_wall = True
        f.wall_side = "left"
        f.grounded = False
        assert f.jump()
        assert not f.on_wall
        assert f.vx > 0
        assert f.vy == pytest.approx(f.jump_power * 0.8)


class TestCollision:
    def test_overlapping_fighters_separate(self, make_fighter):
        a = make_fighter("left")
        b = make_fighter("right")
        a.x, a.z = 0, 0
        b.x, b.z = 10, 0
        resolve_fighter_collision(a, b)
        assert a.x < 0
        assert b.x > 10
        assert a.vx < 0 < b.vx

    def test_coincident_fighters_get_fixed_push(self, make_fighter):
        a = make_fighter("left")
        b = make_fighter("right")
        a.x = b.x = 0
        a.z = b.z = 0
        resolve_fighter_collision(a, b)
        for f in (a, b):
            assert all(math.isfinite(v) for v in (f.x, f.z, f.vx, f.vz))
        assert b.x - a.x == pytest.approx(20)

    def test_dead_fighters_do_not_collide(self, make_fighter):
        a = make_fighter("left")
        b = make_fighter("right")
        a.x = b.x = 0
        b.hp = 0
        resolve_fighter_collision(a, b)
        assert a.x == 0 and b.x == 0


class TestDeadBody:
    def test_dead_fighter_falls_and_settles(self, make_fighter):
        f = make_fighter()
        f.hp = 0
        f.set_state(AnimState.DEATH)
        f.y = 200
        for _ in range(300):
            f.update_physics()
        assert f.y == ARENA.min_y + f.sprite_size / 2
        assert f.grounded

    def test_dead_wallcrawler_lets_go(self, make_fighter):
        f = make_fighter(mobility="wallcrawler")
        f.on_wall = True
        f.wall_side = "left"
        f.y = 150
        f.hp = 0
        f.set_state(AnimState.DEATH)
        f.update_physics()
        assert not f.on_wall
        assert f.wall_side is None

    def test_dead_fighter_without_death_state_is_frozen(self, make_fighter):
        f = make_fighter()
        f.hp = 0
        f.y = 200
        f.update_physics()
        assert f.y == 200
