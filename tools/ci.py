#!/usr/bin/env python3
# Copyright 2026 Draftgen Contributors
# SPDX-License-Identifier: Apache-2.0

"""Run the draftgen CI checks locally.

Steps run in order: format, lint, type check, tests with coverage, a CLI
smoke test, the documentation build and the wheel build. Use ``--skip``
to leave out steps by key and ``--fail-fast`` to stop at the first failing
step.
"""

import argparse
import subprocess
import sys
import time
from dataclasses import dataclass
from pathlib import Path

from yachalk import chalk

# ###############
# Public Interface
# ###############


@dataclass(frozen=True)
class Step:
    key: str
    title: str
    command: list[str]


STEPS: list[Step] = [
    Step("format", "Format check", ["uv", "run", "ruff", "format", "--check", "src/", "tests/", "tools/"]),
    Step("lint", "Lint", ["uv", "run", "ruff", "check", "src/", "tests/", "tools/"]),
    Step("types", "Type check", ["uv", "run", "ty", "check", "src/"]),
    Step("tests", "Tests", ["uv", "run", "pytest", "--cov=draftgen", "--cov-report=term-missing"]),
    Step("smoke", "CLI smoke test", ["uv", "run", "draftgen", "--help"]),
    Step("docs", "Documentation", ["uv", "run", "sphinx-build", "-q", "-W", "-b", "html", "docs/sphinx", "build/docs"]),
    Step("build", "Build", ["uv", "build"]),
]


def main() -> int:
    """Run the selected CI steps and print a summary."""
    args = _parse_args()
    unknown = set(args.skip) - {step.key for step in STEPS}
    if unknown:
        print(chalk.red(f"Unknown step(s): {', '.join(sorted(unknown))}"), file=sys.stderr)
        return 2

    results: list[tuple[str, bool, float]] = []
    for step in STEPS:
        if step.key in args.skip:
            continue
        passed, elapsed = _run_step(step)
        results.append((step.title, passed, elapsed))
        if not passed and args.fail_fast:
            break

    _print_header("Summary")
    for title, passed, elapsed in results:
        colour = chalk.green if passed else chalk.red
        print(colour(f"  {'PASS' if passed else 'FAIL'}  {title} ({elapsed:.1f}s)"))
    print()
    return 0 if all(passed for _, passed, _ in results) else 1


# ################
# Implementation
# ################


def _parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run the draftgen CI checks.")
    parser.add_argument(
        "--skip",
        action="append",
        default=[],
        metavar="STEP",
        help=f"Skip a step; one of {', '.join(step.key for step in STEPS)}",
    )
    parser.add_argument("--fail-fast", action="store_true", help="Stop at the first failing step")
    return parser.parse_args()


def _run_step(step: Step) -> tuple[bool, float]:
    _print_header(step.title)
    start = time.monotonic()
    proc = subprocess.run(step.command, cwd=_repo_root())
    return proc.returncode == 0, time.monotonic() - start


def _print_header(title: str) -> None:
    sep = chalk.blue("=" * 60)
    print(f"\n{sep}")
    print(chalk.blue(f"  {title}"))
    print(sep)


def _repo_root() -> Path:
    return Path(__file__).resolve().parent.parent


if __name__ == "__main__":
    sys.exit(main())
