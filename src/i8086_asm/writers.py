from __future__ import annotations
from typing import List
from .utils import to_hex8

def to_hex_lines(code: bytes, *, per_line: int = 16) -> List[str]:
    """Volcado 'offset: bytes' con `per_line` bytes por línea."""
    lines = []
    for off in range(0, len(code), per_line):
        chunk = code[off:off + per_line]
        lines.append(f"{off:04x}: " + " ".join(to_hex8(b) for b in chunk))
    return lines

def write_hex(code: bytes, path: str) -> None:
    lines = to_hex_lines(code)
    with open(path, "w", encoding="utf-8") as f:
        for line in lines:
            f.write(line + "\n")

def write_bin(code: bytes, path: str) -> None:
    """Imagen binaria plana (p.ej. un .com)."""
    with open(path, "wb") as f:
        f.write(code)
