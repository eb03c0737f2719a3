"""End-to-end program tests.

Test cases live in programs/*.tests files. Format:

    === test name
    program text
    ---
    exit: 1
    expected stdout, exactly
    ---

The `exit:` line is optional and defaults to 0.
"""

import signal
from pathlib import Path

import pytest

from polylang import run

RUN_TIMEOUT = 5
PROGRAMS_DIR = Path(__file__).parent / "programs"


def _timeout_handler(signum, frame):
    raise TimeoutError("run() timed out")


signal.signal(signal.SIGALRM, _timeout_handler)


def parse_test_file(path: Path) -> list[tuple[str, str, str]]:
    """Parse .tests file into (name, input, expected) tuples."""
    lines = path.read_text().split("\n")
    result: list[tuple[str, str, str]] = []
    i = 0
    while i < len(lines):
        line = lines[i]
        if line.startswith("=== "):
            test_name = line[4:].strip()
            i += 1
            input_lines: list[str] = []
            while i < len(lines) and not lines[i].startswith("---"):
                input_lines.append(lines[i])
                i += 1
            if i < len(lines) and lines[i] == "---":
                i += 1
            expected_lines: list[str] = []
            while i < len(lines) and not lines[i].startswith("---"):
                expected_lines.append(lines[i])
                i += 1
            if i < len(lines) and lines[i] == "---":
                i += 1
            test_input = "\n".join(input_lines)
            expected = "\n".join(expected_lines).strip()
            result.append((test_name, test_input, expected))
        else:
            i += 1
    return result


def split_expected(expected: str) -> tuple[int, str]:
    """Split an expected section into (exit_code, stdout)."""
    lines = expected.split("\n") if expected != "" else []
    exit_code = 0
    if len(lines) > 0 and lines[0].startswith("exit:"):
        exit_code = int(lines[0][5:].strip())
        lines = lines[1:]
    return exit_code, "\n".join(lines)


def discover_program_tests() -> list[tuple[str, str, str]]:
    """Find all program tests, returns (test_id, input, expected)."""
    results = []
    for test_file in sorted(PROGRAMS_DIR.glob("*.tests")):
        for name, input_code, expected in parse_test_file(test_file):
            results.append((f"{test_file.stem}/{name}", input_code, expected))
    return results


def pytest_generate_tests(metafunc):
    """Parametrize tests over program test files."""
    if "program_input" in metafunc.fixturenames:
        params = [
            pytest.param(input_code, expected, id=test_id)
            for test_id, input_code, expected in discover_program_tests()
        ]
        metafunc.parametrize("program_input,program_expected", params)


def test_program(program_input: str, program_expected: str):
    """Verify a program prints exactly the expected output."""
    exit_code, stdout = split_expected(program_expected)
    try:
        signal.alarm(RUN_TIMEOUT)
        result = run(program_input)
    finally:
        signal.alarm(0)
    assert result.stdout.strip() == stdout
    assert result.exit_code == exit_code
