# -*- coding: utf-8 -*-
# pydoit task file
# see https://pydoit.org/
# run from this dir with `doit`, or `doit list`, `doit help` etc. (pip install doit 1st)

from doit.action import CmdAction

_TEST_PARAMS = [
    {
        "name": "help",
        "long": "help",
        "default": False,
        "type": bool,
    },
    {
        "name": "keyword",
        "short": "k",
        "default": "",
    },
    {
        "name": "retry",
        "short": "r",
        "default": False,
        "type": bool,
    },
    {
        "name": "print_logs",
        "short": "p",
        "default": False,
        "type": bool,
    },
    {
        "name": "full_trace",
        "short": "f",
        "default": False,
        "type": bool,
    },
]

_TEST_HELP = """echo '
{title}
====================

Filter Options:
  -k, --keyword TEXT    Only run tests matching the keyword expression
                        Example: -k "settings and not push"
  -r, --retry           Only run previously failed tests

Output Options:
  -p, --print-logs      Print test logs to console instead of capturing
  -f, --full-trace      Show full traceback on errors
{extra}
  '"""


def _build_pytest_command(
    test_dir,
    keyword="",
    retry=False,
    print_logs=False,
    full_trace=False,
):
    """Helper function to build pytest commands for test tasks."""
    cmd = ["pytest"]

    if print_logs:
        cmd.append("--capture=no")
    if full_trace:
        cmd.append("--full-trace")

    cmd.extend(["--color=yes", "-vv", "-x"])

    if retry:
        cmd.append("--lf")
    if keyword:
        cmd.extend(["-k", f'"{keyword}"'])

    cmd.append(test_dir)

    return " ".join(cmd)


def task_install():
    """Install calnex in editable mode, with test dependencies"""
    return {
        "actions": ["pip install -e .[test]"],
        "verbosity": 2,
    }


def task_test_logic():
    """Run the offline test suite (tests in test/logic/)."""

    def router(keyword, retry, print_logs, full_trace, help=False):
        if help:
            return _TEST_HELP.format(title="Test Logic Runner Help", extra="")
        return _build_pytest_command(
            "test/logic/",
            keyword=keyword,
            retry=retry,
            print_logs=print_logs,
            full_trace=full_trace,
        )

    return {
        "actions": [CmdAction(router)],
        "params": _TEST_PARAMS,
        "verbosity": 2,
    }


def task_test_hardware():
    """Run the hardware test suite against a real device (test/hardware/)."""

    def router(keyword, retry, print_logs, full_trace, host, insecure, help=False):
        if help:
            return _TEST_HELP.format(
                title="Test Hardware Runner Help",
                extra="""
Device Options:
  -H, --host TEXT       Device address, exported as CALNEX_TEST_HOST
  -i, --insecure        Skip TLS verification (CALNEX_TEST_INSECURE=1)

Examples:
  doit test_hardware -H 10.0.0.5 -i""",
            )
        if not host:
            return "echo 'Error: --host is required' && exit 1"
        env = f"CALNEX_TEST_HOST={host} "
        if insecure:
            env += "CALNEX_TEST_INSECURE=1 "
        return env + _build_pytest_command(
            "test/hardware/",
            keyword=keyword,
            retry=retry,
            print_logs=print_logs,
            full_trace=full_trace,
        )

    return {
        "actions": [CmdAction(router)],
        "params": _TEST_PARAMS
        + [
            {
                "name": "host",
                "short": "H",
                "default": "",
            },
            {
                "name": "insecure",
                "short": "i",
                "default": False,
                "type": bool,
            },
        ],
        "verbosity": 2,
    }


def task_format():
    """Format code using ruff."""
    return {
        "actions": [
            "ruff check --select I --fix src/calnex test/ dodo.py",
            "ruff format src/calnex test/ dodo.py",
        ],
        "verbosity": 2,
    }


def task_docs():
    """Generate documentation using pdoc3."""
    return {
        "actions": [
            "pdoc3 --output-dir docs/ --html --force --skip-errors ./src/calnex/"
        ],
        "verbosity": 2,
    }
