from .python_executor import PythonExecutor, PythonExecutorConfig
from .sqlite_executor import SqliteExecutor, SqliteExecutorConfig, split_statements

__all__ = [
    "PythonExecutor", "PythonExecutorConfig",
    "SqliteExecutor", "SqliteExecutorConfig",
    "split_statements",
]
