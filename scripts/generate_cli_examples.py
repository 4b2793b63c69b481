from __future__ import annotations

import shutil
import subprocess
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable

EXAMPLES_ROOT = Path("examples/cli-options")
BASE_ARGS = ["--width", "160", "--height", "160"]


@dataclass
class Expected:
    path: Path
    size: int | None = None


@dataclass
class Example:
    name: str
    args: list[str]
    expected: list[Expected]
    clean: list[Path] | None = None

    def full_args(self) -> list[str]:
        return [sys.executable, "mask.py", *self.args]


EXAMPLES: list[Example] = [
    Example(
        name="x-bounds",
        args=[*BASE_ARGS, "--x-min", "-1.5", "--x-max", "-1.0", "--format", "png",
              "--output", str(EXAMPLES_ROOT / "x-bounds" / "period-three.png")],
        expected=[Expected(EXAMPLES_ROOT / "x-bounds" / "period-three.png")],
        clean=[EXAMPLES_ROOT / "x-bounds"],
    ),
    Example(
        name="y-bounds",
        args=[*BASE_ARGS, "--y-min", "0.0", "--y-max", "1.5", "--output",
              str(EXAMPLES_ROOT / "y-bounds" / "upper-plane.png")],
        expected=[Expected(EXAMPLES_ROOT / "y-bounds" / "upper-plane.png")],
        clean=[EXAMPLES_ROOT / "y-bounds"],
    ),
    Example(
        name="width",
        args=[*BASE_ARGS, "--width", "240", "--format", "raw", "--output",
              str(EXAMPLES_ROOT / "width" / "wide.raw")],
        expected=[Expected(EXAMPLES_ROOT / "width" / "wide.raw", size=240 * 160)],
        clean=[EXAMPLES_ROOT / "width"],
    ),
    Example(
        name="height",
        args=[*BASE_ARGS, "--height", "96", "--format", "raw", "--output",
              str(EXAMPLES_ROOT / "height" / "short.raw")],
        expected=[Expected(EXAMPLES_ROOT / "height" / "short.raw", size=160 * 96)],
        clean=[EXAMPLES_ROOT / "height"],
    ),
    Example(
        name="max-iterations",
        args=[*BASE_ARGS, "--max-iterations", "20", "--output",
              str(EXAMPLES_ROOT / "max-iterations" / "low-budget.png")],
        expected=[Expected(EXAMPLES_ROOT / "max-iterations" / "low-budget.png")],
        clean=[EXAMPLES_ROOT / "max-iterations"],
    ),
    Example(
        name="backend",
        args=[*BASE_ARGS, "--backend", "scalar", "--output",
              str(EXAMPLES_ROOT / "backend" / "scalar.npy")],
        expected=[Expected(EXAMPLES_ROOT / "backend" / "scalar.npy")],
        clean=[EXAMPLES_ROOT / "backend"],
    ),
    Example(
        name="format",
        args=[*BASE_ARGS, "--format", "npy", "--output", str(EXAMPLES_ROOT / "format" / "mask")],
        expected=[Expected(EXAMPLES_ROOT / "format" / "mask.npy")],
        clean=[EXAMPLES_ROOT / "format"],
    ),
    Example(
        name="verbose",
        args=[*BASE_ARGS, "--verbose", "--output", str(EXAMPLES_ROOT / "verbose" / "mask.png")],
        expected=[Expected(EXAMPLES_ROOT / "verbose" / "mask.png")],
        clean=[EXAMPLES_ROOT / "verbose"],
    ),
]


def _ensure_clean(paths: Iterable[Path]) -> None:
    for path in paths:
        if path.exists():
            if path.is_dir():
                shutil.rmtree(path)
            else:
                path.unlink()


def _prepare(example: Example) -> None:
    clean = example.clean or []
    _ensure_clean(clean)
    for expected in example.expected:
        expected.path.parent.mkdir(parents=True, exist_ok=True)


def _verify(example: Example) -> None:
    for expected in example.expected:
        if not expected.path.is_file():
            raise RuntimeError(f"Expected file {expected.path} was not created")
        if expected.size is not None and expected.path.stat().st_size != expected.size:
            raise RuntimeError(
                f"File {expected.path} has {expected.path.stat().st_size} bytes, expected {expected.size}"
            )


def main() -> None:
    EXAMPLES_ROOT.mkdir(parents=True, exist_ok=True)
    for example in EXAMPLES:
        print(f"\n[cli-example] {example.name}")
        _prepare(example)
        completed = subprocess.run(example.full_args(), check=True)
        if completed.returncode != 0:
            raise RuntimeError(f"Example {example.name} failed with {completed.returncode}")
        _verify(example)
    print("\nAll CLI examples generated successfully.")


if __name__ == "__main__":
    main()
