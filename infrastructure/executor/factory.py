from __future__ import annotations

from domain.models.challenge import ChallengeKind
from domain.ports.executor import ExecutionEnvironmentPort
from infrastructure.executor.backends.python_executor import PythonExecutor, PythonExecutorConfig
from infrastructure.executor.backends.sqlite_executor import SqliteExecutor, SqliteExecutorConfig


def make_executor(
    kind: ChallengeKind,
    sqlite_config: SqliteExecutorConfig | None = None,
    python_config: PythonExecutorConfig | None = None,
) -> ExecutionEnvironmentPort:
    if kind == "sql":
        return SqliteExecutor(sqlite_config or SqliteExecutorConfig())
    if kind == "python":
        return PythonExecutor(python_config or PythonExecutorConfig())
    raise ValueError(f"Unknown executor kind: {kind}")
