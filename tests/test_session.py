import pytest

from moral_tales.model.result import Fatal, PartialFailure, Success
from moral_tales.model.story import StoryPart, StoryRequest
from moral_tales.session import INTERRUPTED_MESSAGE, StoryView, progress_update


def _parts(*paragraphs):
    return [StoryPart(paragraph=p) for p in paragraphs]


def test_begin_clears_previous_story():
    view = StoryView(parts=_parts("old"), error="old error")
    request = StoryRequest(topic="Courage", length=4)

    view.begin(request)

    assert view.is_generating
    assert view.parts == []
    assert view.error is None
    assert view.request == request
    assert not view.can_export and not view.can_play


def test_begin_twice_is_refused():
    view = StoryView()
    view.begin(StoryRequest())

    with pytest.raises(RuntimeError):
        view.begin(StoryRequest())


def test_finish_with_success():
    view = StoryView()
    view.begin(StoryRequest())

    view.finish(Success(_parts("One.", "Two.")))

    assert not view.is_generating
    assert view.error is None
    assert view.full_story == "One.\n\nTwo."
    assert view.can_export and view.can_play


def test_finish_with_partial_failure_shows_text_and_warning():
    view = StoryView()
    view.begin(StoryRequest())

    view.finish(PartialFailure(_parts("One."), "pictures failed"))

    assert view.parts == _parts("One.")
    assert view.error == "pictures failed"
    assert view.is_partial


def test_new_run_clears_partial_flag():
    view = StoryView()
    view.begin(StoryRequest())
    view.finish(PartialFailure(_parts("One."), "pictures failed"))

    view.begin(StoryRequest())

    assert not view.is_partial
    view.finish(Fatal(message="busy"))
    assert not view.is_partial


def test_interrupt_ends_the_run_without_a_story():
    view = StoryView()
    view.begin(StoryRequest())

    view.interrupt()

    assert not view.is_generating
    assert view.parts == []
    assert view.error == INTERRUPTED_MESSAGE
    view.begin(StoryRequest())
    assert view.is_generating


def test_finish_with_fatal_result():
    view = StoryView()
    view.begin(StoryRequest())

    view.finish(Fatal(message="busy"))

    assert view.parts == []
    assert view.error == "busy"
    assert not view.has_story


def test_fatal_result_never_carries_parts():
    with pytest.raises(ValueError):
        Fatal(_parts("One."), "busy")


@pytest.mark.parametrize("stage,payload,fraction", [
    ("story:generating", {}, 0.05),
    ("story:generated", {"total_scenes": 3}, 0.2),
    ("image:generating", {"index": 1, "total": 4}, 0.2),
    ("image:done", {"index": 2, "total": 4}, 0.6),
    ("image:failed", {"index": 4, "total": 4}, 1.0),
    ("pipeline:complete", {"total_parts": 4, "failures": 0}, 1.0),
    ("unknown", {}, 0.0),
])
def test_progress_update(stage, payload, fraction):
    value, _ = progress_update(stage, payload)
    assert value == pytest.approx(fraction)
