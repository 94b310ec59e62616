"""Tests for dealertheme.themes.editor."""

import json

import pytest
import yaml

from dealertheme.errors import ErrorCode, ThemeError
from dealertheme.themes.constants import DEFAULT_TOKENS
from dealertheme.themes.editor import TokenEditor, read_token_file, token_paths
from dealertheme.themes.models import LoadStatus, TokenValidationError


@pytest.fixture
def theme(store):
    created, _ = store.create_theme("Showroom", {"colors": {"primary": "#111111"}})
    return created


class TestTokenEditor:
    def test_unknown_theme_rejected(self, store, loader):
        with pytest.raises(ThemeError) as excinfo:
            TokenEditor(store, loader, "missing")
        assert excinfo.value.code is ErrorCode.THEME_NOT_FOUND

    def test_edits_stay_local_until_save(self, store, loader, theme):
        editor = TokenEditor(store, loader, theme.theme_id)
        editor.set_token("colors", "primary", "#222222")
        editor.set_nested_token("typography", "fontSize", "lg", "1.25rem")

        assert editor.is_dirty is True
        assert editor.tokens["typography"]["fontSize"]["lg"] == "1.25rem"
        stored = store.get_token_documents(theme.theme_id)[0].tokens
        assert stored == {"colors": {"primary": "#111111"}}

    def test_unknown_section_rejected(self, store, loader, theme):
        editor = TokenEditor(store, loader, theme.theme_id)
        with pytest.raises(ValueError):
            editor.set_token("shadows", "sm", "1px")

    def test_set_token_path(self, store, loader, theme):
        editor = TokenEditor(store, loader, theme.theme_id)
        editor.set_token_path("colors.accent", "#00FF00")
        editor.set_token_path("typography.fontWeight.bold", "700")

        tokens = editor.tokens
        assert tokens["colors"] == {"primary": "#111111", "accent": "#00FF00"}
        assert tokens["typography"]["fontWeight"] == {"bold": "700"}

    @pytest.mark.parametrize("path", ["colors", "colors.", "a.b.c.d", "shadows.sm"])
    def test_set_token_path_rejects_bad_paths(self, store, loader, theme, path):
        editor = TokenEditor(store, loader, theme.theme_id)
        with pytest.raises(ValueError):
            editor.set_token_path(path, "1px")
        assert editor.is_dirty is False

    def test_preview_applies_without_persisting(self, store, loader, registry, theme):
        editor = TokenEditor(store, loader, theme.theme_id)
        editor.set_token("colors", "primary", "#333333")

        editor.preview()

        assert registry.get_property("--color-primary") == "#333333"
        assert store.get_token_documents(theme.theme_id)[0].tokens["colors"]["primary"] == "#111111"

    def test_save_inactive_theme_does_not_reload(self, store, loader, registry, theme):
        editor = TokenEditor(store, loader, theme.theme_id)
        editor.set_token("colors", "primary", "#444444")

        result = editor.save()

        assert result is None
        assert editor.is_dirty is False
        assert store.get_token_documents(theme.theme_id)[0].tokens["colors"]["primary"] == "#444444"
        assert len(registry) == 0
        assert loader.generation == 0

    def test_save_active_theme_reloads(self, store, loader, registry, theme):
        store.set_active_theme(theme.theme_id)
        editor = TokenEditor(store, loader, theme.theme_id)
        editor.set_token("colors", "primary", "#555555")

        result = editor.save()

        assert result is not None
        assert result.status is LoadStatus.APPLIED
        assert registry.get_property("--color-primary") == "#555555"

    def test_save_rejects_invalid_tokens(self, store, loader, theme):
        editor = TokenEditor(store, loader, theme.theme_id)
        editor.set_token("colors", "primary", "not-a-color")

        with pytest.raises(TokenValidationError):
            editor.save()
        assert store.get_token_documents(theme.theme_id)[0].tokens["colors"]["primary"] == "#111111"

    def test_activate_applies_theme(self, store, loader, registry, theme):
        editor = TokenEditor(store, loader, theme.theme_id)

        result = editor.activate()

        assert result.ok
        assert editor.theme.is_active is True
        assert registry.get_property("--color-primary") == "#111111"

    def test_reset_to_defaults(self, store, loader, theme):
        editor = TokenEditor(store, loader, theme.theme_id)
        editor.reset_to_defaults()
        editor.save()
        assert store.get_token_documents(theme.theme_id)[0].tokens == DEFAULT_TOKENS

    def test_export_json_and_yaml(self, store, loader, theme, tmp_path):
        editor = TokenEditor(store, loader, theme.theme_id)

        json_path = editor.export_tokens(tmp_path / "out" / "tokens.json")
        yaml_path = editor.export_tokens(tmp_path / "out" / "tokens.yaml")

        assert json.loads(json_path.read_text(encoding="utf-8")) == {"colors": {"primary": "#111111"}}
        assert yaml.safe_load(yaml_path.read_text(encoding="utf-8")) == {"colors": {"primary": "#111111"}}

    def test_import_replaces_working_copy(self, store, loader, theme, tmp_path):
        source = tmp_path / "import.yml"
        source.write_text(yaml.safe_dump({"spacing": {"sm": "4px"}}), encoding="utf-8")
        editor = TokenEditor(store, loader, theme.theme_id)

        editor.import_tokens(source)

        assert editor.tokens == {"spacing": {"sm": "4px"}}
        assert editor.is_dirty is True


class TestReadTokenFile:
    def test_missing_file(self, tmp_path):
        with pytest.raises(ThemeError) as excinfo:
            read_token_file(tmp_path / "nope.json")
        assert excinfo.value.code is ErrorCode.FILE_NOT_FOUND

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text("{oops", encoding="utf-8")
        with pytest.raises(ThemeError) as excinfo:
            read_token_file(path)
        assert excinfo.value.code is ErrorCode.FILE_INVALID

    def test_top_level_must_be_mapping(self, tmp_path):
        path = tmp_path / "list.yaml"
        path.write_text("- a\n- b\n", encoding="utf-8")
        with pytest.raises(ThemeError):
            read_token_file(path)


def test_token_paths_follow_section_order():
    tokens = {
        "spacing": {"sm": "4px"},
        "typography": {"fontFamily": "Inter", "fontSize": {"lg": "1.25rem"}},
        "colors": {"primary": "#111111"},
        "unknown": {"x": "1"},
    }
    assert token_paths(tokens) == [
        ("colors.primary", "#111111"),
        ("typography.fontFamily", "Inter"),
        ("typography.fontSize.lg", "1.25rem"),
        ("spacing.sm", "4px"),
    ]


def test_token_paths_cover_default_document():
    paths = dict(token_paths(DEFAULT_TOKENS))
    assert paths["colors.primary"] == DEFAULT_TOKENS["colors"]["primary"]
    assert paths["typography.fontWeight.bold"] == DEFAULT_TOKENS["typography"]["fontWeight"]["bold"]
