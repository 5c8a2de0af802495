from preview_app.core.services.debounce_controller import DebounceController


def _controller(scheduler, delay_ms=200):
    rendered = []
    controller = DebounceController(rendered.append, delay_ms, scheduler.create_timer)
    return controller, rendered


def test_burst_of_edits_renders_once_with_last_text(scheduler):
    controller, rendered = _controller(scheduler)

    for step, text in enumerate(["a", "ab", "abc", "abcd", "abcde"]):
        if step:
            scheduler.advance(150 // 4)
        controller.on_document_changed(text)

    scheduler.advance(199)
    assert rendered == []
    scheduler.advance(1)
    assert rendered == ["abcde"]

    scheduler.advance(1000)
    assert rendered == ["abcde"]


def test_unchanged_text_is_not_rendered_twice(scheduler):
    controller, rendered = _controller(scheduler)
    controller.on_document_changed("same")
    scheduler.advance(200)
    controller.on_document_changed("same")
    scheduler.advance(200)

    assert rendered == ["same"]


def test_reset_forces_next_fire_to_render(scheduler):
    controller, rendered = _controller(scheduler)
    controller.on_document_changed("same")
    scheduler.advance(200)
    controller.reset()
    controller.on_document_changed("same")
    scheduler.advance(200)

    assert rendered == ["same", "same"]


def test_teardown_cancels_pending_render(scheduler):
    controller, rendered = _controller(scheduler)
    controller.on_document_changed("text")
    assert controller.is_pending()
    controller.teardown()
    scheduler.advance(500)

    assert rendered == []
    assert not controller.is_pending()


def test_flush_renders_pending_change_immediately(scheduler):
    controller, rendered = _controller(scheduler)
    controller.on_document_changed("now")
    controller.flush()

    assert rendered == ["now"]
    scheduler.advance(500)
    assert rendered == ["now"]


def test_mark_processed_suppresses_matching_fire(scheduler):
    controller, rendered = _controller(scheduler)
    controller.mark_processed("shown")
    controller.on_document_changed("shown")
    scheduler.advance(200)

    assert rendered == []
