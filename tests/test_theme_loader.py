"""Tests for the active-theme loader."""

from __future__ import annotations

from PySide6.QtCore import QEventLoop, QTimer

from dealertheme.themes.models import LoadStatus
from dealertheme.themes.service import ThemeLoader
from dealertheme.workers.theme_load_worker import fetch_active


def _seed(store, name, tokens, *, active=False):
    theme, _ = store.create_theme(name, tokens)
    if active:
        store.set_active_theme(theme.theme_id)
    return theme


def test_applies_active_theme(store, registry, loader):
    theme = _seed(
        store,
        "Night",
        {"colors": {"background": "#000000"}, "spacing": {"sm": "4px"}},
        active=True,
    )

    result = loader.load_and_apply_active_theme()

    assert result.status is LoadStatus.APPLIED
    assert result.theme_id == theme.theme_id
    assert registry.get_property("--color-background") == "#000000"
    assert registry.get_property("--spacing-sm") == "4px"
    assert loader.active_theme_id == theme.theme_id


def test_activation_switch(store, registry, loader):
    _seed(store, "A", {"colors": {"background": "#000000"}}, active=True)
    b = _seed(store, "B", {"colors": {"background": "#FFFFFF"}})
    loader.load_and_apply_active_theme()

    store.set_active_theme(b.theme_id)
    loader.load_and_apply_active_theme()

    assert registry.get_property("--color-background") == "#FFFFFF"


def test_no_active_theme_leaves_registry_alone(store, registry, loader):
    _seed(store, "Inactive", {"colors": {"background": "#123456"}})
    registry.set_property("--color-background", "#ABCDEF")

    result = loader.load_and_apply_active_theme()

    assert result.status is LoadStatus.NOT_FOUND
    assert registry.properties() == {"--color-background": "#ABCDEF"}


def test_active_theme_without_documents_is_not_found(store, registry, loader):
    theme = _seed(store, "Empty", {}, active=True)
    conn = store._conn_or_raise()
    with conn:
        conn.execute("DELETE FROM design_tokens WHERE theme_id = ?", (theme.theme_id,))

    result = loader.load_and_apply_active_theme()

    assert result.status is LoadStatus.NOT_FOUND
    assert result.theme_id == theme.theme_id
    assert len(registry) == 0


def test_storage_error_is_reported_not_raised(store, registry, loader):
    _seed(store, "A", {"colors": {"background": "#000000"}}, active=True)
    registry.set_property("--color-background", "#ABCDEF")
    failures = []
    loader.load_failed.connect(failures.append)
    store.close()

    result = loader.load_and_apply_active_theme()

    assert result.status is LoadStatus.STORAGE_ERROR
    assert registry.get_property("--color-background") == "#ABCDEF"
    assert failures == [result.message]


def test_invalid_tokens_are_not_applied(store, registry, loader):
    _seed(store, "Broken", {"colors": {"primary": "not-a-color"}}, active=True)

    result = loader.load_and_apply_active_theme()

    assert result.status is LoadStatus.INVALID
    assert result.problems
    assert len(registry) == 0


def test_non_ascii_font_weight_is_invalid_not_raised(store, registry, loader):
    _seed(store, "Odd", {"typography": {"fontWeight": {"bold": "²"}}}, active=True)

    result = loader.load_and_apply_active_theme()

    assert result.status is LoadStatus.INVALID
    assert loader.last_result is result
    assert len(registry) == 0


def test_invalid_tokens_applied_when_validation_disabled(store, registry):
    _seed(store, "Broken", {"colors": {"primary": "not-a-color"}}, active=True)
    loader = ThemeLoader(store, registry, validate=False)

    result = loader.load_and_apply_active_theme()

    assert result.ok
    assert registry.get_property("--color-primary") == "not-a-color"


def test_superseded_load_does_not_apply(store, registry, loader):
    _seed(store, "A", {"colors": {"background": "#000000"}}, active=True)
    b = _seed(store, "B", {"colors": {"background": "#FFFFFF"}})

    older = fetch_active(store, loader.begin_load())
    store.set_active_theme(b.theme_id)
    newer = loader.complete_load(fetch_active(store, loader.begin_load()))
    stale = loader.complete_load(older)

    assert newer.status is LoadStatus.APPLIED
    assert stale.status is LoadStatus.SUPERSEDED
    assert registry.get_property("--color-background") == "#FFFFFF"
    assert loader.last_result is newer


def test_switch_clears_properties_unique_to_old_theme(store, registry, loader):
    _seed(store, "A", {"colors": {"background": "#000000", "accent": "#FF0000"}}, active=True)
    b = _seed(store, "B", {"colors": {"background": "#FFFFFF"}})
    registry.set_property("--brand-logo-height", "40px")
    loader.load_and_apply_active_theme()

    store.set_active_theme(b.theme_id)
    loader.load_and_apply_active_theme()

    assert "--color-accent" not in registry
    assert registry.get_property("--brand-logo-height") == "40px"


def test_switch_notifies_registry_listeners_once(store, registry, loader):
    _seed(store, "A", {"colors": {"background": "#000000", "accent": "#FF0000"}}, active=True)
    b = _seed(store, "B", {"colors": {"background": "#FFFFFF"}})
    loader.load_and_apply_active_theme()
    snapshots = []
    registry.changed.connect(lambda: snapshots.append(registry.properties()))

    store.set_active_theme(b.theme_id)
    loader.load_and_apply_active_theme()

    assert snapshots == [{"--color-background": "#FFFFFF"}]


def test_switch_merges_when_reset_disabled(store, registry):
    loader = ThemeLoader(store, registry, reset_on_switch=False)
    _seed(store, "A", {"colors": {"background": "#000000", "accent": "#FF0000"}}, active=True)
    b = _seed(store, "B", {"colors": {"background": "#FFFFFF"}})
    loader.load_and_apply_active_theme()

    store.set_active_theme(b.theme_id)
    loader.load_and_apply_active_theme()

    assert registry.get_property("--color-accent") == "#FF0000"
    assert registry.get_property("--color-background") == "#FFFFFF"


def test_preview_apply_bypasses_store(store, registry, loader):
    loader.apply_tokens({"colors": {"primary": "#010203"}})
    assert registry.get_property("--color-primary") == "#010203"
    assert store.list_themes() == []


def test_theme_applied_signal(store, loader):
    theme = _seed(store, "A", {"colors": {"background": "#000000"}}, active=True)
    applied = []
    loader.theme_applied.connect(applied.append)

    loader.load_and_apply_active_theme()

    assert applied == [theme.theme_id]


def test_async_load_applies_on_completion(store, registry, loader):
    _seed(store, "A", {"colors": {"background": "#000000"}}, active=True)
    loop = QEventLoop()
    loader.theme_applied.connect(lambda _theme_id: loop.quit())
    loader.load_failed.connect(lambda _message: loop.quit())
    QTimer.singleShot(5000, loop.quit)

    generation = loader.load_active_theme_async()
    loop.exec()
    loader.shutdown()

    assert loader.last_result is not None
    assert loader.last_result.generation == generation
    assert loader.last_result.status is LoadStatus.APPLIED
    assert registry.get_property("--color-background") == "#000000"
