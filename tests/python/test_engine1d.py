from __future__ import annotations

import pytest
from pytest import approx

from swarmsim.sim.core import engine1d
from swarmsim.sim.core.errors import InvalidStateError
from swarmsim.sim.core.generations import iter_generations
from swarmsim.sim.core.robot import Robot
from swarmsim.sim.types.policy import NextPosition


def test_two_robots_meet_in_the_middle():
    state = [Robot("A", 0.0), Robot("B", 20.0)]

    result = engine1d.step(state, 100)

    assert [(robot.label, robot.x) for robot in result] == [("A", 10.0), ("B", 10.0)]


def test_faulty_robot_stays_and_anchors_the_mover():
    state = [Robot("F", 0.0, faulty=True), Robot("M", 20.0)]

    result = engine1d.step(state, 100)

    by_label = {robot.label: robot for robot in result}
    assert by_label["F"].x == 0.0
    assert by_label["F"].faulty
    assert by_label["M"].x == 10.0


def test_isolated_robot_keeps_its_position():
    state = [Robot("A", 0.0), Robot("B", 7.5), Robot("C", 500.0)]

    result = engine1d.step(state, 10)

    assert {robot.label: robot.x for robot in result} == {"A": 3.75, "B": 3.75, "C": 500.0}


def test_faulty_positions_are_bit_identical_across_generations():
    odd = 0.1 + 0.2
    state = [Robot("A", -3.3), Robot("F", odd, faulty=True), Robot("B", 9.7)]

    for generation in iter_generations(1, 25, state, lambda s: engine1d.step(s, 5)):
        assert generation.robot("F").x == odd
        assert generation.robot("F").x.hex() == odd.hex()


def test_extremes_and_all_visible_policies_differ():
    state = [Robot("A", 0.0), Robot("B", 2.0), Robot("C", 10.0)]

    extremes = {r.label: r.x for r in engine1d.step(state, 9, NextPosition.EXTREMES)}
    average = {r.label: r.x for r in engine1d.step(state, 9, NextPosition.ALL_VISIBLE)}

    assert extremes == {"A": approx(1.0), "B": approx(5.0), "C": approx(6.0)}
    assert average["A"] == approx(1.0)
    assert average["B"] == approx(4.0)
    assert average["C"] == approx(6.0)


def test_targets_use_the_previous_snapshot_only():
    # A would see B at its new position 7.5 if updates were sequential
    state = [Robot("A", 0.0), Robot("B", 5.0), Robot("C", 10.0)]

    result = {r.label: r.x for r in engine1d.step(state, 5)}

    assert result == {"A": 2.5, "B": 5.0, "C": 7.5}


def test_result_is_sorted_and_coloured():
    state = [Robot("A", 0.0), Robot("B", 4.0), Robot("C", 30.0), Robot("D", 31.0)]

    result = engine1d.step(state, 5)

    xs = [robot.x for robot in result]
    assert xs == sorted(xs)
    assert all(robot.colour for robot in result)
    assert result[0].colour == result[1].colour
    assert result[2].colour == result[3].colour
    assert result[0].colour != result[2].colour


def test_unsorted_input_is_handled():
    state = [Robot("B", 20.0), Robot("A", 0.0)]

    result = engine1d.step(state, 100)

    assert [robot.x for robot in result] == [10.0, 10.0]


@pytest.mark.parametrize(
    "state, vision_range",
    [
        ([], 10),
        ([Robot("A", 0.0), Robot("A", 1.0)], 10),
        ([Robot("A", float("nan"))], 10),
        ([Robot("A", 0.0)], 0),
        ([Robot("A", 0.0)], float("inf")),
    ],
)
def test_invalid_generations_are_rejected(state, vision_range):
    with pytest.raises(InvalidStateError):
        engine1d.step(state, vision_range)


def test_generations_converge_on_a_connected_line():
    state = [Robot(f"R{i}", float(x)) for i, x in enumerate([0, 8, 15, 22, 30, 37])]

    generations = list(iter_generations(1, 60, state, lambda s: engine1d.step(s, 10)))

    assert [g.iteration for g in generations[:3]] == [1, 2, 3]
    final = generations[-1].robots
    assert max(r.x for r in final) - min(r.x for r in final) < 1e-6
