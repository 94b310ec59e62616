"""SQLite-backed store for themes and their design-token documents."""

from __future__ import annotations

import copy
import json
import sqlite3
import uuid
from datetime import datetime, timezone
from pathlib import Path
from threading import RLock
from typing import Any, Mapping

from dealertheme.errors import ErrorCode, ThemeError, classify_exception
from dealertheme.themes.constants import DEFAULT_TOKENS
from dealertheme.themes.models import ActiveTheme, Theme, TokenDocument

SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS themes (
    id          TEXT    PRIMARY KEY,
    name        TEXT    NOT NULL,
    is_active   INTEGER NOT NULL DEFAULT 0,
    is_staging  INTEGER NOT NULL DEFAULT 0,
    created_at  TEXT    NOT NULL
);

CREATE UNIQUE INDEX IF NOT EXISTS themes_single_active
    ON themes (is_active) WHERE is_active = 1;

CREATE TABLE IF NOT EXISTS design_tokens (
    id          TEXT    PRIMARY KEY,
    theme_id    TEXT    NOT NULL REFERENCES themes (id) ON DELETE CASCADE,
    tokens      TEXT    NOT NULL,
    updated_at  TEXT    NOT NULL
);

CREATE INDEX IF NOT EXISTS design_tokens_theme ON design_tokens (theme_id);
"""

_THEME_COLUMNS = "id, name, is_active, is_staging, created_at"


class ThemeStore:
    """Persists themes and token documents.

    At most one theme is active; ``set_active_theme`` moves the flag in a
    single transaction and a partial unique index rejects a second active row.
    """

    def __init__(self, db_path: str | Path) -> None:
        self._db_path = Path(db_path)
        self._conn: sqlite3.Connection | None = None
        self._lock = RLock()

    @property
    def db_path(self) -> Path:
        return self._db_path

    def open(self) -> None:
        """Open the store DB and initialize schema."""
        with self._lock:
            if self._conn is not None:
                return
            try:
                self._db_path.parent.mkdir(parents=True, exist_ok=True)
                conn = sqlite3.connect(self._db_path, check_same_thread=False)
                conn.execute("PRAGMA foreign_keys=ON;")
                conn.execute("PRAGMA journal_mode=WAL;")
                conn.executescript(SCHEMA_SQL)
                conn.commit()
            except (OSError, sqlite3.Error) as exc:
                raise _store_error(exc) from exc
            self._conn = conn

    def close(self) -> None:
        """Close the active DB connection."""
        with self._lock:
            if self._conn is None:
                return
            self._conn.close()
            self._conn = None

    # -- themes --

    def create_theme(
        self,
        name: str,
        tokens: Mapping[str, Any] | None = None,
        *,
        is_staging: bool = False,
    ) -> tuple[Theme, TokenDocument]:
        """Create an inactive theme together with its first token document."""
        cleaned = (name or "").strip()
        if not cleaned:
            raise ValueError("Theme name must be a non-empty string")
        document = copy.deepcopy(dict(tokens)) if tokens is not None else copy.deepcopy(DEFAULT_TOKENS)
        theme_id = uuid.uuid4().hex
        document_id = uuid.uuid4().hex
        now = _utcnow()
        with self._lock:
            conn = self._conn_or_raise()
            try:
                with conn:
                    conn.execute(
                        "INSERT INTO themes (id, name, is_active, is_staging, created_at) "
                        "VALUES (?, ?, 0, ?, ?)",
                        (theme_id, cleaned, int(bool(is_staging)), now),
                    )
                    conn.execute(
                        "INSERT INTO design_tokens (id, theme_id, tokens, updated_at) "
                        "VALUES (?, ?, ?, ?)",
                        (document_id, theme_id, _dump_tokens(document), now),
                    )
            except sqlite3.Error as exc:
                raise _store_error(exc) from exc
        theme = Theme(
            theme_id=theme_id,
            name=cleaned,
            is_active=False,
            is_staging=bool(is_staging),
            created_at=now,
        )
        return theme, TokenDocument(document_id, theme_id, document, now)

    def list_themes(self) -> list[Theme]:
        rows = self._query(
            f"SELECT {_THEME_COLUMNS} FROM themes ORDER BY created_at, name COLLATE NOCASE"
        )
        return [_row_to_theme(row) for row in rows]

    def get_theme(self, theme_id: str) -> Theme | None:
        rows = self._query(f"SELECT {_THEME_COLUMNS} FROM themes WHERE id = ?", (theme_id,))
        return _row_to_theme(rows[0]) if rows else None

    def update_theme(
        self,
        theme_id: str,
        *,
        name: str | None = None,
        is_staging: bool | None = None,
    ) -> Theme:
        """Rename a theme or change its staging flag."""
        assignments: list[str] = []
        params: list[object] = []
        if name is not None:
            cleaned = name.strip()
            if not cleaned:
                raise ValueError("Theme name must be a non-empty string")
            assignments.append("name = ?")
            params.append(cleaned)
        if is_staging is not None:
            assignments.append("is_staging = ?")
            params.append(int(bool(is_staging)))
        if assignments:
            changed = self._execute(
                f"UPDATE themes SET {', '.join(assignments)} WHERE id = ?",
                (*params, theme_id),
            )
            if changed == 0:
                raise ThemeError(ErrorCode.THEME_NOT_FOUND, theme_id=theme_id)
        theme = self.get_theme(theme_id)
        if theme is None:
            raise ThemeError(ErrorCode.THEME_NOT_FOUND, theme_id=theme_id)
        return theme

    def delete_theme(self, theme_id: str) -> bool:
        """Delete a theme and the token documents it owns."""
        return self._execute("DELETE FROM themes WHERE id = ?", (theme_id,)) > 0

    def set_active_theme(self, theme_id: str) -> Theme:
        """Make ``theme_id`` the only active theme."""
        with self._lock:
            conn = self._conn_or_raise()
            try:
                with conn:
                    exists = conn.execute(
                        "SELECT 1 FROM themes WHERE id = ?", (theme_id,)
                    ).fetchone()
                    if exists is None:
                        raise ThemeError(ErrorCode.THEME_NOT_FOUND, theme_id=theme_id)
                    conn.execute(
                        "UPDATE themes SET is_active = 0 WHERE is_active = 1 AND id != ?",
                        (theme_id,),
                    )
                    conn.execute("UPDATE themes SET is_active = 1 WHERE id = ?", (theme_id,))
            except sqlite3.Error as exc:
                raise _store_error(exc) from exc
        theme = self.get_theme(theme_id)
        if theme is None:
            raise ThemeError(ErrorCode.THEME_NOT_FOUND, theme_id=theme_id)
        return theme

    def fetch_active_theme(self) -> ActiveTheme | None:
        """Return the active theme joined with its token documents, or None."""
        with self._lock:
            rows = self._query(
                f"SELECT {_THEME_COLUMNS} FROM themes WHERE is_active = 1 LIMIT 1"
            )
            if not rows:
                return None
            theme = _row_to_theme(rows[0])
            documents = self.get_token_documents(theme.theme_id)
        return ActiveTheme(theme=theme, documents=tuple(documents))

    # -- token documents --

    def get_token_documents(self, theme_id: str) -> list[TokenDocument]:
        rows = self._query(
            "SELECT id, theme_id, tokens, updated_at FROM design_tokens "
            "WHERE theme_id = ? ORDER BY rowid",
            (theme_id,),
        )
        return [_row_to_document(row) for row in rows]

    def get_token_document(self, document_id: str) -> TokenDocument | None:
        rows = self._query(
            "SELECT id, theme_id, tokens, updated_at FROM design_tokens WHERE id = ?",
            (document_id,),
        )
        return _row_to_document(rows[0]) if rows else None

    def add_token_document(self, theme_id: str, tokens: Mapping[str, Any]) -> TokenDocument:
        if self.get_theme(theme_id) is None:
            raise ThemeError(ErrorCode.THEME_NOT_FOUND, theme_id=theme_id)
        document = copy.deepcopy(dict(tokens))
        document_id = uuid.uuid4().hex
        now = _utcnow()
        self._execute(
            "INSERT INTO design_tokens (id, theme_id, tokens, updated_at) VALUES (?, ?, ?, ?)",
            (document_id, theme_id, _dump_tokens(document), now),
        )
        return TokenDocument(document_id, theme_id, document, now)

    def update_tokens(self, document_id: str, tokens: Mapping[str, Any]) -> TokenDocument:
        """Replace a token document wholesale."""
        document = copy.deepcopy(dict(tokens))
        now = _utcnow()
        changed = self._execute(
            "UPDATE design_tokens SET tokens = ?, updated_at = ? WHERE id = ?",
            (_dump_tokens(document), now, document_id),
        )
        if changed == 0:
            raise ThemeError(
                ErrorCode.TOKENS_NOT_FOUND,
                details={"document_id": document_id},
            )
        stored = self.get_token_document(document_id)
        if stored is None:
            raise ThemeError(ErrorCode.TOKENS_NOT_FOUND, details={"document_id": document_id})
        return stored

    # -- helpers --

    def _query(self, sql: str, params: tuple = ()) -> list[tuple]:
        with self._lock:
            conn = self._conn_or_raise()
            try:
                return conn.execute(sql, params).fetchall()
            except sqlite3.Error as exc:
                raise _store_error(exc) from exc

    def _execute(self, sql: str, params: tuple = ()) -> int:
        with self._lock:
            conn = self._conn_or_raise()
            try:
                with conn:
                    cursor = conn.execute(sql, params)
            except sqlite3.Error as exc:
                raise _store_error(exc) from exc
            return cursor.rowcount

    def _conn_or_raise(self) -> sqlite3.Connection:
        if self._conn is None:
            raise RuntimeError("ThemeStore is not open")
        return self._conn


def _row_to_theme(row: tuple) -> Theme:
    return Theme(
        theme_id=str(row[0]),
        name=str(row[1] or ""),
        is_active=bool(row[2]),
        is_staging=bool(row[3]),
        created_at=str(row[4] or ""),
    )


def _row_to_document(row: tuple) -> TokenDocument:
    try:
        tokens = json.loads(row[2])
    except (TypeError, json.JSONDecodeError) as exc:
        raise ThemeError(
            ErrorCode.STORE_CORRUPT,
            theme_id=str(row[1]),
            details={"document_id": str(row[0]), "original": str(exc)},
        ) from exc
    if not isinstance(tokens, dict):
        raise ThemeError(
            ErrorCode.STORE_CORRUPT,
            theme_id=str(row[1]),
            details={"document_id": str(row[0])},
        )
    return TokenDocument(
        document_id=str(row[0]),
        theme_id=str(row[1]),
        tokens=tokens,
        updated_at=str(row[3] or ""),
    )


def _dump_tokens(tokens: Mapping[str, Any]) -> str:
    return json.dumps(tokens, ensure_ascii=False, sort_keys=False)


def _store_error(exc: Exception) -> ThemeError:
    if isinstance(exc, ThemeError):
        return exc
    error = classify_exception(exc)
    if error.code is ErrorCode.OPERATION_FAILED:
        return ThemeError(ErrorCode.STORE_UNAVAILABLE, details=error.details)
    return error


def _utcnow() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="microseconds")
