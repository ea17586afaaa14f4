from __future__ import annotations

import logging
import sqlite3
from pathlib import Path
from urllib.parse import quote

logger = logging.getLogger(__name__)

NULL_TEXT = "NULL"
RESULT_HEADER = "Result"
SUCCESS_TEXT = "Query executed successfully"

_ESCAPES = str.maketrans({"\n": "\\n", "\r": "\\r", "\t": "\\t"})


class GatewayError(Exception):
    """A storage failure whose message is shown to the user as-is."""


class QueryError(GatewayError):
    """A failure while executing a user-supplied statement."""

    def __init__(self, message: str):
        super().__init__(f"SQL error: {message}")


def connect(db_path: Path | str, *, read_only: bool = False, create: bool = False) -> sqlite3.Connection:
    """Open a SQLite database and verify that it is readable.

    The file is opened through a URI so a missing path fails instead of
    silently creating an empty database (unless `create` is set).

    The connection may be used from a worker thread; callers serialize access.
    """
    path = Path(db_path).expanduser()
    if read_only:
        mode = "ro"
    elif create:
        mode = "rwc"
    else:
        mode = "rw"
    uri = f"file:{quote(str(path.resolve()))}?mode={mode}"
    try:
        conn = sqlite3.connect(uri, uri=True, check_same_thread=False)
    except sqlite3.Error as e:
        raise GatewayError(f"unable to open {path}: {e}") from e

    try:
        conn.execute("SELECT name FROM sqlite_master LIMIT 1").fetchall()
    except sqlite3.Error as e:
        conn.close()
        raise GatewayError(f"unable to read {path}: {e}") from e

    logger.info("Opened database %s (mode=%s)", path, mode)
    return conn


def _escape_char(ch: str) -> str:
    code = ord(ch)
    if code < 0x100:
        return f"\\x{code:02x}"
    if code < 0x10000:
        return f"\\u{code:04x}"
    return f"\\U{code:08x}"


def cell_text(value: object) -> str:
    """Render a database value as a single line of text.

    NULL is rendered as the literal `NULL` so it can't be confused with an
    empty string. Blobs use SQLite's `X'..'` literal form. Control and other
    unprintable characters are written as Python-style escapes so they can't
    move the cursor or restyle the terminal.
    """
    if value is None:
        return NULL_TEXT
    if isinstance(value, (bytes, bytearray, memoryview)):
        return f"X'{bytes(value).hex().upper()}'"
    text = str(value).translate(_ESCAPES)
    if text.isprintable():
        return text
    return "".join(ch if ch.isprintable() else _escape_char(ch) for ch in text)



def quote_identifier(name: str) -> str:
    return '"' + name.replace('"', '""') + '"'


def is_read_statement(statement: str) -> bool:
    return statement.lstrip().upper().startswith("SELECT")


def _result_set(cur: sqlite3.Cursor) -> tuple[list[str], list[list[str]]]:
    headers = [col[0] for col in cur.description or ()]
    rows = [[cell_text(v) for v in row] for row in cur.fetchall()]
    return headers, rows


class Gateway:
    """Table enumeration, bounded row fetch and statement execution."""

    def __init__(self, conn: sqlite3.Connection):
        self.conn = conn

    def close(self) -> None:
        # Cancel anything a worker thread still has running before closing.
        self.interrupt()
        self.conn.close()

    def interrupt(self) -> None:
        """Abort the statement currently running on this connection, if any.

        Safe to call from any thread; the interrupted call fails with
        `interrupted`.
        """
        try:
            self.conn.interrupt()
        except sqlite3.ProgrammingError:
            # Already closed.
            pass

    def list_tables(self) -> list[str]:
        try:
            rows = self.conn.execute(
                """
                SELECT name
                FROM sqlite_master
                WHERE type='table' AND name NOT LIKE 'sqlite_%'
                ORDER BY name
                """
            ).fetchall()
        except sqlite3.Error as e:
            raise GatewayError(str(e)) from e
        return [r[0] for r in rows]

    def fetch_rows(self, table: str, limit: int) -> tuple[list[str], list[list[str]]]:
        """Return (headers, rows) for at most `limit` rows of `table`.

        Header order is column declaration order; rows keep result-set order.
        """
        try:
            cur = self.conn.execute(f"SELECT * FROM {quote_identifier(table)} LIMIT ?", (limit,))
            return _result_set(cur)
        except sqlite3.Error as e:
            raise GatewayError(str(e)) from e

    def execute(self, statement: str) -> tuple[list[str], list[list[str]]]:
        """Run an arbitrary statement.

        SELECT statements return every matching row. Anything else is executed
        and committed, and reported through a one-column synthetic result.
        """
        statement = statement.strip()
        if not statement:
            raise QueryError("empty query")

        try:
            if is_read_statement(statement):
                return _result_set(self.conn.execute(statement))

            cur = self.conn.execute(statement)
            self.conn.commit()
        except sqlite3.Error as e:
            if self.conn.in_transaction:
                self.conn.rollback()
            raise QueryError(str(e)) from e

        affected = max(cur.rowcount, 0)
        logger.info("Statement affected %d row(s)", affected)
        return [RESULT_HEADER], [[SUCCESS_TEXT], [f"Rows affected: {affected}"]]
