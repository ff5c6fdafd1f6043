from __future__ import annotations

import sys

import nox

nox.options.error_on_missing_interpreters = True


def tests_impl(
    session: nox.Session,
    extras: str = "test",
    pytest_extra_args: list[str] = [],
) -> None:
    # Install deps and the package itself.
    session.install(f".[{extras}]" if extras else ".")
    # Print the Python version and bytesize.
    session.run("python", "--version")
    session.run("python", "-c", "import struct; print(struct.calcsize('P') * 8)")
    # Print the urllib3 version the dispatchers run on.
    session.run("python", "-c", "import urllib3; print(urllib3.__version__)")

    # Environment variables being passed to the pytest run.
    pytest_session_envvars = {
        "PYTHONWARNINGS": "always::DeprecationWarning",
    }
    if sys.version_info >= (3, 12):
        pytest_session_envvars["COVERAGE_CORE"] = "sysmon"

    # We use parallel mode and then combine in a later CI step
    session.run(
        "python",
        "-m",
        "coverage",
        "run",
        "--parallel-mode",
        "-m",
        "pytest",
        "-v",
        "-ra",
        "--tb=native",
        "--durations=10",
        "--strict-config",
        "--strict-markers",
        *pytest_extra_args,
        *(session.posargs or ("test/",)),
        env=pytest_session_envvars,
    )


@nox.session(python=["3.9", "3.10", "3.11", "3.12", "3.13", "3.14", "pypy3.10"])
def test(session: nox.Session) -> None:
    tests_impl(session)


@nox.session(python="3")
def test_brotli(session: nox.Session) -> None:
    """Check that responses still decode with urllib3's optional
    compression extras installed.
    """
    tests_impl(session, extras="test,brotli,zstd", pytest_extra_args=["-x"])


@nox.session(python="3")
def coverage(session: nox.Session) -> None:
    """Combine the parallel coverage data of previous test runs."""
    session.install("coverage>=7.0")
    session.run("coverage", "combine")
    session.run("coverage", "report", "-m")


@nox.session()
def format(session: nox.Session) -> None:
    """Run code formatters."""
    lint(session)


@nox.session(python="3.12")
def lint(session: nox.Session) -> None:
    session.install("black", "isort", "flake8")
    session.run("black", "--check", "src", "dummyserver", "test", "noxfile.py")
    session.run("isort", "--check-only", "src", "dummyserver", "test", "noxfile.py")
    session.run("flake8", "--max-line-length=120", "src", "dummyserver", "test")

    mypy(session)


@nox.session(python="3.12")
def mypy(session: nox.Session) -> None:
    """Run mypy."""
    session.install("mypy", "nox", ".[test]")
    session.run("mypy", "--version")
    session.run(
        "mypy",
        "-p",
        "dummyserver",
        "-m",
        "noxfile",
        "-p",
        "gfetch",
        "-p",
        "test",
    )
