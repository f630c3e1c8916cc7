from warp_kitten.settings import DEFAULT_SPEECH
from warp_kitten.speech import SpeechBubble
from warp_kitten.timers import Scheduler


def test_starts_hidden_with_default_text():
    bubble = SpeechBubble(Scheduler())
    assert not bubble.visible
    assert bubble.text == DEFAULT_SPEECH


def test_say_shows_then_hides():
    s = Scheduler()
    bubble = SpeechBubble(s)
    bubble.say("hello", 2.0)
    assert bubble.visible and bubble.text == "hello"
    assert bubble.expires_at == 2.0
    s.advance(1.5)
    assert bubble.visible
    s.advance(1.0)
    assert not bubble.visible


def test_new_line_preempts_and_restarts_timer():
    s = Scheduler()
    bubble = SpeechBubble(s)
    bubble.say("first", 2.0)
    s.advance(1.0)
    bubble.say("second", 2.0)
    s.advance(1.5)
    assert bubble.visible
    assert bubble.text == "second"
    s.advance(1.0)
    assert not bubble.visible
    assert s.pending() == 0


def test_reset_hides_and_restores_default():
    s = Scheduler()
    bubble = SpeechBubble(s, default_text="purr")
    bubble.say("yum", 3.0)
    bubble.reset()
    assert not bubble.visible
    assert bubble.text == "purr"
    assert s.pending() == 0
