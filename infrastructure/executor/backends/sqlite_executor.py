from __future__ import annotations
import logging
import sqlite3
import time
from dataclasses import dataclass
from typing import Any, Dict, Iterator, List, Optional

from domain.exceptions import ExecutionEnvironmentError, SchemaApplicationError
from domain.ports.executor import ExecutionEnvironmentPort, ExecutionResult, LoadReport, Row

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SqliteExecutorConfig:
    preview_rows: int = 5
    # user runs are rolled back so a DELETE cannot leak into later runs
    isolate_runs: bool = True


def split_statements(script: str) -> Iterator[str]:
    """Yield complete SQL statements, keeping semicolons inside literals."""
    buf = ""
    for piece in script.split(";"):
        buf += piece + ";"
        if sqlite3.complete_statement(buf):
            stmt = buf.strip()
            buf = ""
            if stmt.strip(";").strip():
                yield stmt
    tail = buf.rstrip(";").strip()
    if tail:
        yield tail


def rows_to_dicts(cur: sqlite3.Cursor) -> tuple[List[str], List[Row]]:
    if cur.description is None:
        return [], []
    cols = [d[0] for d in cur.description]
    rows: List[Row] = []
    for r in cur.fetchall():
        rows.append({c: r[i] for i, c in enumerate(cols)})
    return cols, rows


class SqliteExecutor(ExecutionEnvironmentPort):
    def __init__(self, config: SqliteExecutorConfig | None = None):
        self.config = config or SqliteExecutorConfig()
        self._conn: Optional[sqlite3.Connection] = None
        self._guarded = False

    @property
    def is_ready(self) -> bool:
        return self._conn is not None

    @property
    def conn(self) -> sqlite3.Connection:
        if self._conn is None:
            raise ExecutionEnvironmentError("SQL engine not loaded yet.")
        return self._conn

    def start(self) -> None:
        try:
            self._conn = sqlite3.connect(":memory:", isolation_level=None, check_same_thread=False)
            self._conn.set_authorizer(self._authorize)
        except sqlite3.Error as e:
            raise ExecutionEnvironmentError(f"Failed to initialize SQLite: {e}") from e
        logger.info("SQLite engine loaded (sqlite %s)", sqlite3.sqlite_version)

    def reset(self) -> "SqliteExecutor":
        fresh = SqliteExecutor(self.config)
        fresh.start()
        return fresh

    def close(self) -> None:
        if self._conn is not None:
            self._conn.close()
            self._conn = None

    def load(self, schema_sql: str, data_sql: str) -> LoadReport:
        try:
            self.conn.executescript(schema_sql)
        except sqlite3.Error as e:
            raise SchemaApplicationError(f"schema failed: {e}") from e

        report = LoadReport()
        for stmt in split_statements(data_sql):
            try:
                self.conn.execute(stmt)
                report.statements_applied += 1
            except sqlite3.Error as e:
                logger.warning("Insert error, statement skipped: %s (%s)", e, stmt[:120])
                report.statements_skipped += 1
                report.skipped_errors.append(str(e))

        report.previews = self.preview()
        return report

    def table_names(self) -> List[str]:
        cur = self.conn.execute("SELECT name FROM sqlite_master WHERE type='table' ORDER BY rowid")
        return [r[0] for r in cur.fetchall() if r[0] != "sqlite_sequence"]

    def preview(self) -> Dict[str, List[Row]]:
        out: Dict[str, List[Row]] = {}
        for table in self.table_names():
            cur = self.conn.execute(f'SELECT * FROM "{table}" LIMIT ?', (self.config.preview_rows,))
            _, out[table] = rows_to_dicts(cur)
        return out

    def _authorize(self, action: int, *_: Any) -> int:
        # inside an isolated run the user may not end or nest the wrapping transaction
        if self._guarded and action in (sqlite3.SQLITE_TRANSACTION, sqlite3.SQLITE_SAVEPOINT):
            return sqlite3.SQLITE_DENY
        return sqlite3.SQLITE_OK

    def run(self, code: str) -> ExecutionResult:
        t0 = time.perf_counter()
        isolate = self.config.isolate_runs
        conn = self.conn

        first: Optional[tuple[List[str], List[Row]]] = None
        began = False
        try:
            if isolate:
                conn.execute("BEGIN")
                began = True
                self._guarded = True
            for stmt in split_statements(code):
                cur = conn.execute(stmt)
                cols, rows = rows_to_dicts(cur)
                if first is None and cur.description is not None:
                    first = (cols, rows)

            elapsed_ms = (time.perf_counter() - t0) * 1000.0
            cols, rows = first if first is not None else ([], [])
            return ExecutionResult.ok(rows, columns=cols, execution_time_ms=elapsed_ms)

        except sqlite3.Error as e:
            elapsed_ms = (time.perf_counter() - t0) * 1000.0
            return ExecutionResult.failed(str(e), execution_time_ms=elapsed_ms)

        finally:
            self._guarded = False
            if began and conn.in_transaction:
                conn.execute("ROLLBACK")
