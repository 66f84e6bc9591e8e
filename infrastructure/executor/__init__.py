from .factory import make_executor
from .dataset import DatasetLocator
from .backends import (
    PythonExecutor, PythonExecutorConfig,
    SqliteExecutor, SqliteExecutorConfig,
    split_statements,
)

__all__ = [
    "make_executor",
    "DatasetLocator",
    "PythonExecutor", "PythonExecutorConfig",
    "SqliteExecutor", "SqliteExecutorConfig",
    "split_statements",
]
