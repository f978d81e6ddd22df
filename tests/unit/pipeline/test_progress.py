"""
Unit-тесты для ProgressReporter.

ЦКП: Монотонный поток событий, ошибка подписчика не ломает импорт.
"""

from src.recipe_import.progress import ImportStage, ProgressEvent, ProgressReporter


class TestProgressReporter:
    """Тесты потока событий."""

    def test_events_are_recorded_and_sent(self):
        """Должен записывать события и отдавать их подписчику."""
        received = []
        reporter = ProgressReporter(received.append)

        reporter.emit(ImportStage.START, 0, "Starting import")
        reporter.emit(ImportStage.STRUCTURING, 30, "Structuring recipe")

        assert [e.progress for e in received] == [0, 30]
        assert reporter.events == received
        assert reporter.last_progress == 30

    def test_progress_never_decreases(self):
        """Должен не уменьшать прогресс."""
        reporter = ProgressReporter()

        reporter.emit(ImportStage.STRUCTURING, 70, "a")
        event = reporter.emit(ImportStage.VALIDATING, 40, "b")

        assert event.progress == 70

    def test_progress_capped_at_100(self):
        """Должен ограничивать прогресс сотней."""
        assert ProgressReporter().emit(ImportStage.DONE, 150, "done").progress == 100

    def test_fail_repeats_last_progress(self):
        """Должен повторять последний прогресс при ошибке."""
        reporter = ProgressReporter()
        reporter.emit(ImportStage.EXTRACTING, 10, "Extracting")
        error = ValueError("boom")

        event = reporter.fail(error)

        assert event.stage == ImportStage.FAILED
        assert event.progress == 10
        assert event.error is error
        assert event.message == "boom"
        assert event.is_terminal

    def test_no_sink(self):
        """Должен работать без подписчика."""
        reporter = ProgressReporter()

        reporter.emit(ImportStage.START, 0, "Starting import")

        assert len(reporter.events) == 1

    def test_failing_sink_is_ignored(self):
        """Должен игнорировать падение подписчика."""
        def broken_sink(event: ProgressEvent) -> None:
            raise RuntimeError("UI closed")

        reporter = ProgressReporter(broken_sink)

        reporter.emit(ImportStage.START, 0, "Starting import")
        reporter.emit(ImportStage.DONE, 100, "Import complete")

        assert [e.stage for e in reporter.events] == [ImportStage.START, ImportStage.DONE]


class TestProgressEvent:
    """Тесты события."""

    def test_to_dict(self):
        """Должен сериализовать событие в словарь."""
        event = ProgressEvent(stage=ImportStage.VALIDATING, progress=80, message="Validating")

        assert event.to_dict() == {
            "stage": "validating",
            "progress": 80,
            "message": "Validating",
            "error": None,
        }
        assert event.is_terminal is False

    def test_stage_is_str(self):
        """Должен сравнивать стадию со строкой."""
        assert ImportStage.DONE == "done"
