import random

import pytest

from warp_kitten.kitten import Kitten, KittenState, PursuitController
from warp_kitten.settings import (
    CLICK_SPEECH,
    DEFAULT_SPEECH,
    EXCITED_SPEECH,
    SATISFIED_SPEECHES,
)
from warp_kitten.tally import TreatTally

# Kitten starts at 50%/50% of an 800x600 viewport: pixel (400, 300)


def test_idle_picks_nearest_settled_treat(controller, place):
    far = place(0, 0)        # 500 px away
    near = place(480, 240)   # 100 px away
    controller.update()
    assert controller.state is KittenState.CHASING
    assert controller.kitten.target_id == near.id
    assert controller.kitten.target_id != far.id


def test_far_treat_never_targeted_while_near_available(controller, engine, place):
    far = place(0, 0)
    near = place(480, 240)
    for _ in range(10):
        controller.update()
        assert controller.kitten.target_id == near.id
    assert not far.is_eaten


def test_treat_outside_radius_is_ignored(controller, place):
    place(0, 0)
    controller.update()
    assert controller.state is KittenState.IDLE
    assert controller.kitten.target_id is None


def test_airborne_treat_is_not_chased(controller, place):
    place(450, 300, vy=-6.0, landing=False)
    controller.update()
    assert controller.state is KittenState.IDLE


def test_treat_at_apex_counts_as_settled(controller, place):
    apex = place(450, 300, vy=0.2, landing=False)
    controller.update()
    assert controller.kitten.target_id == apex.id


def test_eaten_treat_is_not_a_candidate(controller, engine, place):
    treat = place(450, 300)
    engine.mark_eaten(treat.id)
    controller.update()
    assert controller.state is KittenState.IDLE


def test_equal_distance_tie_goes_to_first_scanned(controller, place):
    first = place(500, 300)
    place(300, 300)
    controller.update()
    assert controller.kitten.target_id == first.id


def test_chase_start_says_something_excited(controller, place, scheduler):
    place(480, 300)
    controller.update()
    assert controller.speech.visible
    assert controller.speech.text == EXCITED_SPEECH
    scheduler.advance(controller.config.excited_speech_duration)
    assert not controller.speech.visible


def test_chasing_steps_toward_target(controller, place, viewport):
    place(480, 300)
    controller.update()
    controller.update()
    kx, ky = controller.pixel_position()
    assert kx == pytest.approx(400 + controller.config.chase_step)
    assert ky == pytest.approx(300)


def test_chase_uses_current_viewport_size(controller, place, viewport):
    place(480, 300)
    controller.update()
    viewport.resize(1600, 600)
    # Kitten is now at pixel (800, 300); the treat sits 320 px to its left
    controller.update()
    kx, _ = controller.pixel_position()
    assert kx == pytest.approx(800 - controller.config.chase_step)


def test_chase_aborts_when_target_removed(controller, engine, place):
    treat = place(480, 300)
    controller.update()
    text_before = controller.speech.text
    engine.remove(treat.id)
    controller.update()
    assert controller.state is KittenState.IDLE
    assert controller.kitten.target_id is None
    assert controller.speech.text == text_before


def test_chase_aborts_when_target_expires(controller, engine, place, scheduler):
    treat = place(480, 300)
    controller.update()
    assert controller.state is KittenState.CHASING
    scheduler.advance(engine.config.treat_lifetime + 0.1)
    assert engine.find(treat.id) is None
    controller.update()
    assert controller.state is KittenState.IDLE
    assert controller.kitten.target_id is None


def test_chase_aborts_when_target_eaten_elsewhere(controller, engine, place):
    treat = place(480, 300)
    controller.update()
    engine.mark_eaten(treat.id)
    controller.update()
    assert controller.state is KittenState.IDLE


def test_reaching_treat_eats_it(controller, engine, place, scheduler):
    treat = place(410, 300)
    controller.update()
    controller.update()
    assert controller.state is KittenState.EATING
    assert treat.is_eaten
    assert controller.speech.visible
    assert controller.speech.text in SATISFIED_SPEECHES
    assert controller.kitten.target_id is None

    # Eating ignores other treats
    place(420, 300)
    controller.update()
    assert controller.state is KittenState.EATING

    scheduler.advance(controller.config.eating_duration)
    assert controller.state is KittenState.IDLE
    assert not controller.speech.visible
    assert controller.speech.text == DEFAULT_SPEECH
    assert engine.find(treat.id) is None


def test_chase_stays_inside_window(engine, viewport, scheduler):
    kitten = Kitten(x=50.0, y=99.5)
    controller = PursuitController(engine, viewport, scheduler, rng=random.Random(3), kitten=kitten)
    treat = engine.find(engine.spawn(400, 700))
    treat.x, treat.y, treat.vx, treat.vy, treat.is_landing = 400.0, 800.0, 0.0, 0.0, True
    controller.update()
    controller.update()
    _, ky = controller.pixel_position()
    assert ky <= viewport.height - controller.config.chase_edge_inset


def test_wandering_moves_kitten_within_margins(controller, scheduler):
    controller.start()
    scheduler.advance(controller.config.wander_interval_max + 0.01)
    k = controller.kitten
    assert (k.x, k.y) != (50.0, 50.0)
    lo, hi = controller.config.wander_margin_min, controller.config.wander_margin_max
    assert lo <= k.x <= hi and lo <= k.y <= hi
    controller.close()


def test_chasing_halts_wandering(controller, place, scheduler):
    place(650, 300)  # 250 px to the right, same height
    controller.start()
    scheduler.advance(4.9)
    assert controller.state is KittenState.CHASING
    assert controller.kitten.y == pytest.approx(50.0)
    assert controller.kitten.x > 50.0
    controller.close()


def test_click_on_kitten_talks_and_bounces(controller, scheduler):
    assert controller.hit_test(400, 300)
    assert not controller.hit_test(100, 100)
    controller.on_kitten_click()
    assert controller.speech.text == CLICK_SPEECH
    assert controller.kitten.y == pytest.approx(45.0)
    scheduler.advance(0.2)
    assert controller.kitten.y == pytest.approx(50.0)
    scheduler.advance(1.9)
    assert not controller.speech.visible


def test_hit_test_against_drawn_center(controller):
    # Model at (400, 300), sprite still drawn near (100, 100)
    assert controller.hit_test(110, 100, center=(100, 100))
    assert not controller.hit_test(400, 300, center=(100, 100))


def test_click_while_chasing_does_not_land_off_path(controller, place, scheduler):
    place(480, 200)
    controller.update()
    assert controller.state is KittenState.CHASING
    controller.on_kitten_click()
    assert controller.kitten.y == pytest.approx(45.0)
    controller.update()
    y_after_step = controller.kitten.y
    scheduler.advance(0.25)
    assert controller.kitten.y == y_after_step


def test_double_click_lands_back_where_it_started(controller, scheduler):
    controller.on_kitten_click()
    controller.on_kitten_click()
    assert controller.kitten.y == pytest.approx(40.0)
    scheduler.advance(0.25)
    assert controller.kitten.y == pytest.approx(50.0)


def test_close_cancels_every_timer(controller, scheduler):
    controller.start()
    controller.on_kitten_click()
    controller.close()
    assert scheduler.pending() == 0


def test_full_loop_toss_fall_chase_eat(engine, controller, scheduler):
    tally = TreatTally()
    engine.subscribe(tally)
    controller.start()
    engine.spawn(400, 300)
    frame = 1.0 / 60
    for _ in range(int(9.0 / frame)):
        scheduler.advance(frame)
        engine.tick(1.0)
        for treat in engine.active_treats():
            assert treat.y <= engine.floor
    assert tally.eaten == 1
    assert tally.expired == 0
    assert controller.state in (KittenState.EATING, KittenState.IDLE)
    controller.close()
