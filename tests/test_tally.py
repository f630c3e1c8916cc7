from warp_kitten.tally import TreatTally


def test_tally_counts_treat_lifecycle(engine, scheduler):
    tally = TreatTally()
    engine.subscribe(tally)
    eaten = engine.spawn(100, 100)
    engine.spawn(200, 100)
    engine.spawn(300, 100)
    assert (tally.thrown, tally.on_screen) == (3, 3)

    engine.mark_eaten(eaten)
    scheduler.advance(engine.config.treat_eat_delay)
    assert tally.eaten == 1
    assert tally.on_screen == 2

    scheduler.advance(engine.config.treat_lifetime)
    assert tally.expired == 2
    assert tally.on_screen == 0
    assert tally.summary() == "thrown=3, eaten=1, expired=2, on_screen=0"
