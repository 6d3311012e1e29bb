from __future__ import annotations

import math
import random

import pytest
from pygame.math import Vector2
from pytest import approx

from swarmsim.sim.core import engine2d
from swarmsim.sim.core.errors import InvalidStateError
from swarmsim.sim.core.generations import iter_generations
from swarmsim.sim.core.robot import Robot
from swarmsim.sim.utils.rng import DeterministicRng


def _distance(a: Robot, b: Robot) -> float:
    return math.hypot(a.x - b.x, (a.y or 0.0) - (b.y or 0.0))


def _connected_pairs(state: list[Robot], vision_range: float) -> list[tuple[str, str]]:
    return [
        (a.label, b.label)
        for i, a in enumerate(state)
        for b in state[i + 1 :]
        if _distance(a, b) <= vision_range
    ]


def test_unconstrained_step_moves_to_the_enclosing_disc_centre():
    state = [Robot("A", -1.0, 0.0), Robot("B", 1.0, 0.0), Robot("C", 0.0, 1.0)]

    result = engine2d.step(state, 10, preserve_connectivity=False, rng=DeterministicRng(1))

    for robot in result:
        assert robot.x == approx(0.0, abs=1e-12)
        assert robot.y == approx(0.0, abs=1e-12)


def test_robot_without_neighbours_does_not_move():
    state = [Robot("A", 0.0, 0.0), Robot("B", 50.0, 50.0)]

    result = engine2d.step(state, 10)

    assert result[0] is state[0]
    assert result[1] is state[1]


def test_robot_whose_neighbours_share_its_position_does_not_move():
    state = [Robot("A", 1.0, 1.0), Robot("B", 1.0, 1.0), Robot("C", 40.0, 0.0)]

    result = engine2d.step(state, 5)

    assert result == state


def test_faulty_robot_is_returned_unchanged():
    state = [Robot("F", 0.3, -0.7, faulty=True), Robot("M", 3.0, 4.0)]

    result = engine2d.step(state, 10, preserve_connectivity=False)

    assert result[0] is state[0]
    assert (result[1].x, result[1].y) == (approx(1.65), approx(1.65))


def test_output_keeps_input_order_and_labels():
    state = [Robot("Z", 5.0, 0.0), Robot("A", 0.0, 0.0), Robot("M", 2.0, 2.0)]

    result = engine2d.step(state, 10)

    assert [robot.label for robot in result] == ["Z", "A", "M"]
    assert all(robot.colour is None for robot in result)


def test_bounded_step_is_clamped_by_a_neighbour_behind():
    robot = Robot("R", 0.0, 0.0)
    behind = Robot("B", -10.0, 0.0)

    end = engine2d.max_step_towards(robot, Vector2(10.0, 0.0), [robot, behind], 10.0)

    # theta = pi: l = -5 + 5 = 0, the robot cannot move away from B
    assert end.x == approx(0.0, abs=1e-12)
    assert end.y == approx(0.0, abs=1e-12)


def test_bounded_step_uses_the_chord_formula():
    robot = Robot("R", 0.0, 0.0)
    side = Robot("S", 0.0, 6.0)
    target = Vector2(20.0, 0.0)

    end = engine2d.max_step_towards(robot, target, [robot, side], 10.0)

    # theta = pi / 2: l = sqrt(5² - 3²) = 4
    assert end.x == approx(4.0)
    assert end.y == approx(0.0, abs=1e-12)


def test_bounded_step_never_overshoots_the_target():
    robot = Robot("R", 0.0, 0.0)
    ahead = Robot("A", 2.0, 0.0)

    end = engine2d.max_step_towards(robot, Vector2(1.0, 0.0), [robot, ahead], 10.0)

    assert end.x == approx(1.0)


def test_bounded_step_clamps_a_negative_radicand():
    robot = Robot("R", 0.0, 0.0)
    # a neighbour just beyond the range with a perpendicular heading makes the radicand negative
    side = Robot("S", 0.0, 10.0 + 1e-9)

    end = engine2d.max_step_towards(robot, Vector2(5.0, 0.0), [robot, side], 10.0)

    assert not math.isnan(end.x)
    assert end.x == approx(0.0, abs=1e-3)
    assert end.x >= 0.0


def test_connectivity_is_preserved_after_a_generation():
    generator = random.Random(99)
    vision_range = 10.0
    state = [Robot("R0", 0.0, 0.0)]
    for i in range(1, 25):
        anchor = state[generator.randrange(len(state))]
        angle = generator.uniform(0, 2 * math.pi)
        distance = generator.uniform(2.0, vision_range * 0.95)
        state.append(Robot(f"R{i}", anchor.x + distance * math.cos(angle), anchor.y + distance * math.sin(angle)))

    before = _connected_pairs(state, vision_range)
    result = engine2d.step(state, vision_range, rng=DeterministicRng(5))
    after = {robot.label: robot for robot in result}

    for a, b in before:
        assert _distance(after[a], after[b]) <= vision_range + 1e-9


def test_invalid_planar_state_is_rejected():
    with pytest.raises(InvalidStateError):
        engine2d.step([Robot("A", 0.0), Robot("B", 1.0, 1.0)], 10)
    with pytest.raises(InvalidStateError):
        engine2d.step([Robot("A", 0.0, float("inf"))], 10)


def test_connected_swarm_gathers():
    generator = random.Random(7)
    state = [Robot(f"R{i}", generator.uniform(0, 20), generator.uniform(0, 20)) for i in range(15)]

    generations = list(iter_generations(1, 40, state, lambda s: engine2d.step(s, 30.0, rng=DeterministicRng(3))))

    final = generations[-1].robots
    assert max(_distance(a, b) for a in final for b in final) < 1e-3
