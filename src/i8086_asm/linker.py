# src/i8086_asm/linker.py
from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import Dict, List, Tuple

from .ast import Instruction, Label, Program, Sym
from .encoding import Cell, encode_instruction
from .errors import DuplicateLabel, OperandOutOfRange, ProgramFormatError, UnresolvedLabel
from .utils import is_signed_nbit

log = logging.getLogger(__name__)

# ---------- Resultado de la pasada 1 ----------

@dataclass(frozen=True)
class FirstPass:
    """Código con marcas de etiqueta pendientes y tabla de símbolos (nombre -> offset)."""
    cells: Tuple[Cell, ...]
    symtab: Dict[str, int]
    lines: Dict[int, int]   # offset de cada marca -> línea de la instrucción que la emitió

    @property
    def size(self) -> int:
        return len(self.cells)

    @property
    def pending(self) -> List[Tuple[int, str]]:
        """(offset, etiqueta) de cada byte de desplazamiento aún sin resolver."""
        return [(p, c.name) for p, c in enumerate(self.cells) if isinstance(c, Sym)]

# ---------- Pasada 1: recoger etiquetas y codificar ----------

def first_pass(program: Program) -> FirstPass:
    cells: List[Cell] = []
    symtab: Dict[str, int] = {}
    lines: Dict[int, int] = {}

    for n in program:
        pc = len(cells)
        if isinstance(n, Label):
            if n.name in symtab:
                raise DuplicateLabel(n.name, line=n.line)
            symtab[n.name] = pc
            continue
        if not isinstance(n, Instruction):
            raise ProgramFormatError(f"Nodo de programa desconocido: {n!r}")
        encoded = encode_instruction(n)
        for i, c in enumerate(encoded):
            if isinstance(c, Sym) and n.line is not None:
                lines[pc + i] = n.line
        cells.extend(encoded)
        log.debug("%04x: %s -> %d bytes", pc, n, len(encoded))

    log.debug("pasada 1: %d bytes, %d etiquetas", len(cells), len(symtab))
    return FirstPass(cells=tuple(cells), symtab=symtab, lines=lines)

# ---------- Pasada 2: resolver desplazamientos relativos ----------

def rel8(target: int, pos: int) -> int:
    """Desplazamiento con signo desde el byte siguiente a `pos` hasta `target`."""
    return target - (pos + 1)

def resolve_labels(first: FirstPass) -> bytes:
    out = bytearray()
    for pos, c in enumerate(first.cells):
        if not isinstance(c, Sym):
            out.append(c)
            continue
        line = first.lines.get(pos)
        target = first.symtab.get(c.name)
        if target is None:
            raise UnresolvedLabel(c.name, line=line)
        d = rel8(target, pos)
        if not is_signed_nbit(d, 8):
            raise OperandOutOfRange(d, 8, line=line, what=f"Salto relativo a '{c.name}'")
        out.append(d % 256)
    log.debug("pasada 2: %d referencias resueltas", len(first.pending))
    return bytes(out)
