"""Tests for dealertheme.themes.registry."""

import pytest

from dealertheme.themes.registry import StyleRegistry


class TestStyleRegistry:
    """Tests for the StyleRegistry class."""

    def test_set_and_get_property(self):
        registry = StyleRegistry()
        registry.set_property("--color-primary", "#fff")
        assert registry.get_property("--color-primary") == "#fff"
        assert "--color-primary" in registry
        assert registry.get_property("--missing", "x") == "x"

    def test_rejects_names_without_dashes(self):
        registry = StyleRegistry()
        with pytest.raises(ValueError):
            registry.set_property("color-primary", "#fff")
        with pytest.raises(ValueError):
            registry.update({"--": "#fff"})

    def test_update_emits_changed_once(self):
        registry = StyleRegistry()
        calls = []
        registry.changed.connect(lambda: calls.append(1))

        changed = registry.update({"--a-1": "1", "--a-2": "2"})

        assert changed == 2
        assert len(calls) == 1

    def test_update_without_changes_is_silent(self):
        registry = StyleRegistry()
        registry.update({"--a-1": "1"})
        calls = []
        registry.changed.connect(lambda: calls.append(1))

        assert registry.update({"--a-1": "1"}) == 0
        assert calls == []

    def test_replace_prefixed_drops_missing_names(self):
        registry = StyleRegistry()
        registry.update({"--color-a": "1", "--color-b": "2", "--spacing-sm": "4px", "--brand": "x"})

        removed = registry.replace_prefixed(("--color-", "--spacing-"), {"--color-b": "3"})

        assert sorted(removed) == ["--color-a", "--spacing-sm"]
        assert registry.properties() == {"--color-b": "3", "--brand": "x"}

    def test_replace_prefixed_emits_changed_once(self):
        registry = StyleRegistry()
        registry.update({"--color-a": "1", "--color-b": "2"})
        calls = []
        registry.changed.connect(lambda: calls.append(1))

        registry.replace_prefixed(("--color-",), {"--color-b": "9", "--color-c": "4"})

        assert len(calls) == 1

    def test_replace_prefixed_rejects_bad_names_before_writing(self):
        registry = StyleRegistry()
        registry.update({"--color-a": "1"})
        with pytest.raises(ValueError):
            registry.replace_prefixed(("--color-",), {"--color-b": "2", "bad": "3"})
        assert registry.properties() == {"--color-a": "1"}

    def test_remove_and_clear(self):
        registry = StyleRegistry()
        registry.set_property("--x-1", "1")
        assert registry.remove_property("--x-1") is True
        assert registry.remove_property("--x-1") is False
        registry.set_property("--x-2", "2")
        registry.clear()
        assert len(registry) == 0

    def test_properties_returns_copy(self):
        registry = StyleRegistry()
        registry.set_property("--x-1", "1")
        snapshot = registry.properties()
        snapshot["--x-1"] = "changed"
        assert registry.get_property("--x-1") == "1"
