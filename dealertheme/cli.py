"""Command line interface for managing dealership themes."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Sequence

from dealertheme.app import ThemeRuntime, build_runtime, configure_logging, run_app
from dealertheme.config.settings import AppSettings
from dealertheme.core.theme_store import ThemeStore
from dealertheme.errors import ErrorCode, ThemeError, classify_exception, format_error_for_user
from dealertheme.themes.applier import custom_properties
from dealertheme.themes.compiler import compile_root_css
from dealertheme.themes.editor import TokenEditor, read_token_file
from dealertheme.themes.models import Theme, TokenValidationError
from dealertheme.themes.validation import validate_token_document

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="dealertheme",
        description="Manage dealership site themes and their design tokens.",
    )
    parser.add_argument("--settings", type=Path, help="INI settings file (default: platform store)")
    parser.add_argument("--store", type=Path, help="Theme store database (overrides settings)")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log to stderr as well")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("list", help="List themes")

    create = sub.add_parser("create", help="Create a theme")
    create.add_argument("name")
    create.add_argument("--tokens", type=Path, help="JSON or YAML token document (default tokens otherwise)")
    create.add_argument("--staging", action="store_true", help="Mark the theme as staging")
    create.add_argument("--activate", action="store_true", help="Activate the theme after creating it")

    activate = sub.add_parser("activate", help="Make a theme the active one")
    activate.add_argument("theme")

    show = sub.add_parser("show", help="Print a theme's token document as JSON")
    show.add_argument("theme", nargs="?", help="Theme id or name (default: active theme)")

    css = sub.add_parser("css", help="Print custom properties as a :root rule")
    css.add_argument("theme", nargs="?", help="Theme id or name (default: active theme)")

    export = sub.add_parser("export", help="Write a theme's tokens to a JSON or YAML file")
    export.add_argument("theme")
    export.add_argument("path", type=Path)

    import_ = sub.add_parser("import", help="Replace a theme's tokens from a JSON or YAML file")
    import_.add_argument("theme")
    import_.add_argument("path", type=Path)

    set_ = sub.add_parser("set", help="Set one token and save the theme")
    set_.add_argument("theme")
    set_.add_argument("token", help="Dotted token path, e.g. colors.primary or typography.fontSize.lg")
    set_.add_argument("value")

    reset = sub.add_parser("reset", help="Reset a theme's tokens to the defaults")
    reset.add_argument("theme")

    delete = sub.add_parser("delete", help="Delete a theme")
    delete.add_argument("theme")

    sub.add_parser("gui", help="Open the theme admin window")
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    settings = AppSettings(args.settings)
    log = configure_logging(settings)
    if args.verbose and not any(type(h) is logging.StreamHandler for h in log.handlers):
        console = logging.StreamHandler(sys.stderr)
        console.setFormatter(logging.Formatter("%(levelname)s %(name)s: %(message)s"))
        log.addHandler(console)
        log.setLevel(logging.DEBUG)

    if args.command == "gui":
        return run_app(settings, args.store)

    try:
        runtime = build_runtime(settings, args.store)
    except ThemeError as exc:
        print(format_error_for_user(exc), file=sys.stderr)
        return 1

    try:
        return _dispatch(args, runtime)
    except (ThemeError, TokenValidationError, ValueError, OSError) as exc:
        path = Path(exc.filename) if isinstance(exc, OSError) and exc.filename else None
        error = classify_exception(exc, path)
        logger.error("%s failed: %s", args.command, error.to_dict())
        print(format_error_for_user(error), file=sys.stderr)
        return 1
    finally:
        runtime.close()


def _dispatch(args: argparse.Namespace, runtime: ThemeRuntime) -> int:
    store = runtime.store
    loader = runtime.loader

    if args.command == "list":
        themes = store.list_themes()
        if not themes:
            print("No themes.")
        for theme in themes:
            print(_format_theme(theme))
        return 0

    if args.command == "create":
        tokens = None
        if args.tokens is not None:
            tokens = validate_token_document(read_token_file(args.tokens))
        theme, _document = store.create_theme(args.name, tokens, is_staging=args.staging)
        print(f"Created theme {theme.name} ({theme.theme_id})")
        if args.activate:
            return _activate(runtime, theme.theme_id)
        return 0

    if args.command == "activate":
        theme = resolve_theme(store, args.theme)
        return _activate(runtime, theme.theme_id)

    if args.command == "show":
        tokens = _tokens_for(store, args.theme)
        print(json.dumps(tokens, indent=2, ensure_ascii=False))
        return 0

    if args.command == "css":
        if args.theme is None:
            result = loader.load_and_apply_active_theme()
            if not result.ok:
                print(result.message, file=sys.stderr)
                return 1
            print(compile_root_css(runtime.registry), end="")
            return 0
        print(compile_root_css(custom_properties(_tokens_for(store, args.theme))), end="")
        return 0

    if args.command == "export":
        theme = resolve_theme(store, args.theme)
        path = TokenEditor(store, loader, theme.theme_id).export_tokens(args.path)
        print(f"Exported tokens of {theme.name} to {path}")
        return 0

    if args.command == "import":
        theme = resolve_theme(store, args.theme)
        editor = TokenEditor(store, loader, theme.theme_id)
        editor.import_tokens(args.path)
        return _save(editor)

    if args.command == "set":
        theme = resolve_theme(store, args.theme)
        editor = TokenEditor(store, loader, theme.theme_id)
        editor.set_token_path(args.token, args.value)
        return _save(editor)

    if args.command == "reset":
        theme = resolve_theme(store, args.theme)
        editor = TokenEditor(store, loader, theme.theme_id)
        editor.reset_to_defaults()
        return _save(editor)

    if args.command == "delete":
        theme = resolve_theme(store, args.theme)
        store.delete_theme(theme.theme_id)
        print(f"Deleted theme {theme.name}")
        return 0

    raise ValueError(f"Unknown command: {args.command}")


def resolve_theme(store: ThemeStore, ref: str) -> Theme:
    """Find a theme by id, or by a case-insensitive unique name."""
    theme = store.get_theme(ref)
    if theme is not None:
        return theme
    wanted = ref.strip().lower()
    matches = [item for item in store.list_themes() if item.name.lower() == wanted]
    if len(matches) == 1:
        return matches[0]
    if len(matches) > 1:
        raise ThemeError(
            ErrorCode.THEME_NOT_FOUND,
            message=f"Theme name {ref!r} is ambiguous; use the theme id.",
            details={"matches": ", ".join(item.theme_id for item in matches)},
        )
    raise ThemeError(ErrorCode.THEME_NOT_FOUND, theme_id=ref)


def _activate(runtime: ThemeRuntime, theme_id: str) -> int:
    editor = TokenEditor(runtime.store, runtime.loader, theme_id)
    result = editor.activate()
    theme = editor.theme
    if not result.ok:
        print(f"Activated {theme.name}, but it could not be applied: {result.message}", file=sys.stderr)
        for problem in result.problems:
            print(f"  - {problem}", file=sys.stderr)
        return 1
    print(f"Activated theme {theme.name} ({theme.theme_id})")
    return 0


def _save(editor: TokenEditor) -> int:
    result = editor.save()
    print(f"Saved tokens of {editor.theme.name}")
    if result is not None:
        print(result.message)
        if not result.ok:
            return 1
    return 0


def _tokens_for(store: ThemeStore, ref: str | None) -> dict:
    if ref is None:
        active = store.fetch_active_theme()
        if active is None:
            raise ThemeError(ErrorCode.THEME_NOT_FOUND, message="No active theme found.")
        theme_id = active.theme.theme_id
        tokens = active.tokens
    else:
        theme = resolve_theme(store, ref)
        theme_id = theme.theme_id
        documents = store.get_token_documents(theme_id)
        tokens = documents[0].tokens if documents else None
    if tokens is None:
        raise ThemeError(ErrorCode.TOKENS_NOT_FOUND, theme_id=theme_id)
    return tokens


def _format_theme(theme: Theme) -> str:
    flags = []
    if theme.is_active:
        flags.append("active")
    if theme.is_staging:
        flags.append("staging")
    suffix = f" [{', '.join(flags)}]" if flags else ""
    return f"{theme.theme_id}  {theme.name}{suffix}"
