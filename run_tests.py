"""
Test runner script.

Runs the suite against in-memory stores; no MongoDB or network needed.
Extra arguments are passed to pytest, e.g. ``python run_tests.py -k ledger``.
"""

import sys
import subprocess


def run_tests(extra_args):
    """Run pytest with appropriate arguments."""
    cmd = [
        sys.executable,
        "-m",
        "pytest",
        "tests/",
        "-v",
        "--tb=short",
        *extra_args,
    ]

    result = subprocess.run(cmd, capture_output=False)
    return result.returncode


if __name__ == "__main__":
    sys.exit(run_tests(sys.argv[1:]))
