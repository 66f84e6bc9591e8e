# tests/test_python_executor.py
from __future__ import annotations

import base64
import os

import pytest

from domain.exceptions import ExecutionEnvironmentError
from infrastructure.executor import PythonExecutor, PythonExecutorConfig

IRIS_CSV = (
    b"sepal_length,sepal_width,petal_length,petal_width,species\n"
    b"5.1,3.5,1.4,0.2,setosa\n"
    b"7.0,3.2,4.7,1.4,versicolor\n"
    b"6.3,3.3,6.0,2.5,virginica\n"
)


@pytest.fixture()
def executor():
    ex = PythonExecutor()
    ex.start()
    yield ex
    ex.close()


def test_stdout_is_captured(executor: PythonExecutor) -> None:
    res = executor.run("print('hello')\nprint(1 + 1)")
    assert res.success is True
    assert res.output == "hello\n2\n"
    assert res.image is None


def test_preloaded_aliases_are_available(executor: PythonExecutor) -> None:
    res = executor.run("print(type(pd.DataFrame()).__name__, int(np.arange(4).sum()))")
    assert res.output == "DataFrame 6\n"


def test_exception_returns_failed_result_with_traceback(executor: PythonExecutor) -> None:
    res = executor.run("x = 1\nraise ValueError('boom')")
    assert res.success is False
    assert res.output is None
    assert res.error.startswith("Traceback:")
    assert "ValueError: boom" in res.error


def test_syntax_error_is_a_failed_result(executor: PythonExecutor) -> None:
    res = executor.run("def broken(:\n  pass")
    assert res.success is False
    assert "SyntaxError" in res.error


def test_sys_exit_does_not_escape(executor: PythonExecutor) -> None:
    res = executor.run("import sys\nsys.exit(3)")
    assert res.success is False


def test_loaded_files_are_readable_by_relative_name(executor: PythonExecutor) -> None:
    report = executor.load({"iris.csv": IRIS_CSV})
    assert report.files == ["iris.csv"]

    res = executor.run("df = pd.read_csv('iris.csv')\nprint(df.shape)")
    assert res.output == "(3, 5)\n"


def test_working_directory_is_restored(executor: PythonExecutor) -> None:
    before = os.getcwd()
    executor.run("print('x')")
    executor.run("raise RuntimeError()")
    assert os.getcwd() == before


def test_plot_is_captured_as_png(executor: PythonExecutor) -> None:
    res = executor.run("plt.plot([1, 2, 3], [3, 1, 2])\nprint('plotted')")
    assert res.success is True
    assert res.output == "plotted\n"
    assert res.image is not None
    assert base64.b64decode(res.image).startswith(b"\x89PNG")


def test_runs_do_not_share_variables(executor: PythonExecutor) -> None:
    executor.run("leaked = 42")
    res = executor.run("print(leaked)")
    assert res.success is False
    assert "NameError" in res.error


def test_reset_gives_a_separate_workdir(executor: PythonExecutor) -> None:
    executor.load({"iris.csv": IRIS_CSV})
    fresh = executor.reset()
    try:
        assert fresh.workdir != executor.workdir
        assert fresh.run("import os\nprint(os.path.exists('iris.csv'))").output == "False\n"
    finally:
        fresh.close()


def test_close_removes_workdir() -> None:
    ex = PythonExecutor()
    ex.start()
    workdir = ex.workdir
    ex.close()
    assert not os.path.exists(workdir)
    assert ex.is_ready is False
    assert ex.run("print(1)").success is False


def test_missing_module_fails_start() -> None:
    ex = PythonExecutor(PythonExecutorConfig(preload_modules=("no_such_module_for_interview_pad",)))
    with pytest.raises(ExecutionEnvironmentError, match="Installation Failed"):
        ex.start()
    assert ex.is_ready is False


def test_load_before_start_is_an_environment_error() -> None:
    with pytest.raises(ExecutionEnvironmentError):
        PythonExecutor().load({"a.csv": b"x\n1\n"})
