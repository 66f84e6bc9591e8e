from __future__ import annotations
import base64
import contextlib
import importlib
import io
import logging
import os
import shutil
import tempfile
import threading
import time
import traceback
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional, Tuple

from domain.exceptions import ExecutionEnvironmentError
from domain.ports.executor import ExecutionEnvironmentPort, ExecutionResult, LoadReport

logger = logging.getLogger(__name__)

# stdout redirection and chdir are process-wide
_RUN_LOCK = threading.Lock()


@dataclass(frozen=True)
class PythonExecutorConfig:
    preload_modules: Tuple[str, ...] = ("numpy", "pandas", "matplotlib")
    capture_plots: bool = True
    workdir_prefix: str = "interview_pad_"


class PythonExecutor(ExecutionEnvironmentPort):
    def __init__(self, config: PythonExecutorConfig | None = None):
        self.config = config or PythonExecutorConfig()
        self.workdir: Optional[str] = None
        self._base_globals: Optional[Dict[str, Any]] = None
        self._plt: Any = None

    @property
    def is_ready(self) -> bool:
        return self._base_globals is not None

    def start(self) -> None:
        base: Dict[str, Any] = {}
        try:
            for name in self.config.preload_modules:
                importlib.import_module(name)

            if "matplotlib" in self.config.preload_modules:
                import matplotlib
                matplotlib.use("Agg")
                import matplotlib.pyplot as plt
                self._plt = plt
                base["plt"] = plt
            if "pandas" in self.config.preload_modules:
                base["pd"] = importlib.import_module("pandas")
            if "numpy" in self.config.preload_modules:
                base["np"] = importlib.import_module("numpy")
        except ImportError as e:
            raise ExecutionEnvironmentError(f"Installation Failed: {e}") from e

        self.workdir = tempfile.mkdtemp(prefix=self.config.workdir_prefix)
        self._base_globals = base
        logger.info("Python environment ready in %s", self.workdir)

    def reset(self) -> "PythonExecutor":
        fresh = PythonExecutor(self.config)
        fresh.start()
        return fresh

    def close(self) -> None:
        if self.workdir is not None:
            shutil.rmtree(self.workdir, ignore_errors=True)
            self.workdir = None
        self._base_globals = None

    def load(self, files: Mapping[str, bytes]) -> LoadReport:
        if self.workdir is None:
            raise ExecutionEnvironmentError("Python environment not loaded yet.")
        report = LoadReport()
        for name, content in files.items():
            path = os.path.join(self.workdir, os.path.basename(name))
            with open(path, "wb") as fh:
                fh.write(content)
            report.files.append(os.path.basename(name))
        return report

    def run(self, code: str) -> ExecutionResult:
        if self._base_globals is None or self.workdir is None:
            return ExecutionResult.failed("Python environment not loaded yet.")

        t0 = time.perf_counter()
        globals_dict: Dict[str, Any] = {"__builtins__": __builtins__, "__name__": "__main__"}
        globals_dict.update(self._base_globals)
        stdout = io.StringIO()

        with _RUN_LOCK:
            prev_cwd = os.getcwd()
            os.chdir(self.workdir)
            try:
                if self._plt is not None:
                    self._plt.close("all")
                compiled = compile(code, "<user_code>", "exec")
                with contextlib.redirect_stdout(stdout):
                    exec(compiled, globals_dict)
                image = self._capture_plot()
            except (Exception, SystemExit):
                elapsed_ms = (time.perf_counter() - t0) * 1000.0
                return ExecutionResult.failed(f"Traceback:\n{traceback.format_exc()}", execution_time_ms=elapsed_ms)
            finally:
                os.chdir(prev_cwd)

        elapsed_ms = (time.perf_counter() - t0) * 1000.0
        return ExecutionResult.ok(stdout.getvalue(), image=image, execution_time_ms=elapsed_ms)

    def _capture_plot(self) -> Optional[str]:
        plt = self._plt
        if plt is None or not self.config.capture_plots or not plt.get_fignums():
            return None
        buf = io.BytesIO()
        plt.savefig(buf, format="png")
        plt.close("all")
        buf.seek(0)
        return base64.b64encode(buf.read()).decode("utf-8")
