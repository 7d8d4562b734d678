"""File utilities."""
from __future__ import annotations

from pathlib import Path


def ensure_dir(path: str) -> Path:
    """Ensure directory exists and return Path."""
    p = Path(path)
    p.mkdir(parents=True, exist_ok=True)
    return p


def _looks_binary(path: Path) -> bool:
    """Heuristic check for binary content: a NUL byte in the first 512 bytes."""
    with open(path, "rb") as fh:
        chunk = fh.read(512)
    return b"\x00" in chunk


def read_text_file(path: str) -> str:
    """Read a diagram or Markdown source as UTF-8.

    - Missing files raise ``FileNotFoundError``.
    - Binary files raise ``ValueError`` so callers can report them.
    - Undecodable bytes are dropped rather than failing the whole read.
    """
    p = Path(path)
    if not p.is_file():
        raise FileNotFoundError(f"Missing file: {path}")
    if _looks_binary(p):
        raise ValueError(f"Binary file: {p.name}")
    try:
        return p.read_text(encoding="utf-8")
    except UnicodeDecodeError:
        return p.read_text(encoding="utf-8", errors="ignore")


def write_text_file(directory: str, name: str, suffix: str, content: str) -> Path:
    """Write ``content`` to ``<directory>/<name><suffix>`` and return the path."""
    output_path = ensure_dir(directory) / f"{name}{suffix}"
    output_path.write_text(content, encoding="utf-8")
    return output_path
