# paths.py
from pathlib import Path
from typing import Union

DEFAULT_OUTPUT_ROOT = Path("contracts")

PathLike = Union[str, Path]


def target_root(output_root: PathLike, target: str) -> Path:
    return Path(output_root) / target


def safe_dest(root: Path, relative: str) -> Path:
    rel = Path(relative.lstrip("/"))              # normalise
    dest = (root / rel).resolve()
    root_res = root.resolve()
    if dest == root_res or root_res not in dest.parents:
        raise ValueError(f"Unsafe path escape blocked: {relative}")
    dest.parent.mkdir(parents=True, exist_ok=True)
    return dest
