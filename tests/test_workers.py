"""Tests for dealertheme.workers.theme_load_worker."""

from dealertheme.errors import ThemeError
from dealertheme.workers.theme_load_worker import ThemeLoadWorker, fetch_active


class TestThemeLoadWorker:
    """Tests for the ThemeLoadWorker class."""

    def test_worker_creation(self, store):
        worker = ThemeLoadWorker(store, 3)
        assert worker.generation == 3
        assert worker._is_cancelled is False

    def test_worker_cancel(self, store):
        worker = ThemeLoadWorker(store, 1)
        worker.cancel()
        assert worker._is_cancelled is True

    def test_run_emits_outcome(self, store):
        theme, _ = store.create_theme("A", {"colors": {"primary": "#111111"}})
        store.set_active_theme(theme.theme_id)
        worker = ThemeLoadWorker(store, 5)
        received = []
        worker.finished.connect(lambda outcome: received.append(outcome))

        worker.run()

        assert len(received) == 1
        assert received[0].generation == 5
        assert received[0].active.theme.theme_id == theme.theme_id
        assert received[0].error is None

    def test_cancelled_worker_emits_cancelled_only(self, store):
        worker = ThemeLoadWorker(store, 1)
        finished = []
        cancelled = []
        worker.finished.connect(lambda outcome: finished.append(outcome))
        worker.cancelled.connect(lambda: cancelled.append(True))
        worker.cancel()

        worker.run()

        assert finished == []
        assert cancelled == [True]

    def test_run_reports_store_failure(self, store):
        store.close()
        worker = ThemeLoadWorker(store, 2)
        errors = []
        received = []
        worker.error.connect(lambda message: errors.append(message))
        worker.finished.connect(lambda outcome: received.append(outcome))

        worker.run()

        assert len(errors) == 1
        assert isinstance(received[0].error, ThemeError)


def test_fetch_active_without_active_theme(store):
    outcome = fetch_active(store, 9)
    assert outcome.generation == 9
    assert outcome.active is None
    assert outcome.error is None
