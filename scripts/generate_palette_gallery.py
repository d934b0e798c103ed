from __future__ import annotations

import shutil
from dataclasses import dataclass
from pathlib import Path
import subprocess
from typing import Iterable

from mandelrender.registry import BUILTIN_PALETTES

GALLERY_ROOT = Path("examples/palettes")
BASE_ARGS = ["--width", "320", "--height", "240", "--iters", "300"]


@dataclass
class Example:
    name: str
    args: list[str]
    output: Path

    def full_args(self) -> list[str]:
        return ["python", "render.py", *self.args, "--outfile", str(self.output)]


def _palette_examples() -> list[Example]:
    return [
        Example(
            name=gradient.name,
            args=[*BASE_ARGS, "--palette", gradient.name],
            output=GALLERY_ROOT / f"{gradient.name}.png",
        )
        for gradient in BUILTIN_PALETTES
    ]


EXAMPLES: list[Example] = [
    *_palette_examples(),
    Example(
        name="banded",
        args=[*BASE_ARGS, "--palette", "ThermalHeat", "--no-smooth"],
        output=GALLERY_ROOT / "ThermalHeat-banded.png",
    ),
    Example(
        name="colormap",
        args=[*BASE_ARGS, "--palette", "mpl:twilight_shifted"],
        output=GALLERY_ROOT / "twilight_shifted.png",
    ),
    Example(
        name="python-backend",
        args=[*BASE_ARGS, "--palette", "AuroraArc", "--backend", "python"],
        output=GALLERY_ROOT / "AuroraArc-python.png",
    ),
]


def _ensure_clean(paths: Iterable[Path]) -> None:
    for path in paths:
        if path.exists():
            if path.is_dir():
                shutil.rmtree(path)
            else:
                path.unlink()


def main() -> None:
    _ensure_clean([GALLERY_ROOT])
    GALLERY_ROOT.mkdir(parents=True, exist_ok=True)
    for example in EXAMPLES:
        print(f"\n[gallery] {example.name}")
        subprocess.run(example.full_args(), check=True)
        if not example.output.is_file():
            raise RuntimeError(f"Expected file {example.output} was not created")
    print("\nPalette gallery generated successfully.")


if __name__ == "__main__":
    main()
