'''
registro de registros 8086 (tamaño, valor de codificación, clase) y validaciones
'''

from __future__ import annotations
from dataclasses import dataclass
from types import MappingProxyType
from typing import FrozenSet, Literal, Mapping

RegKind = Literal["general", "segment"]

@dataclass(frozen=True)
class RegisterDescriptor:
    """Descriptor inmutable de un registro: nombre, ancho en bits, valor de 3 bits y clase."""
    name: str
    size: int      # 8 o 16
    value: int     # 0..7, el que va en los campos reg/rm o se suma al opcode
    kind: RegKind

# nombre  tamaño  valor  clase
_TABLE = (
    ("ax", 16, 0, "general"),
    ("bx", 16, 3, "general"),
    ("cx", 16, 1, "general"),
    ("dx", 16, 2, "general"),
    ("sp", 16, 4, "general"),
    ("bp", 16, 5, "general"),
    ("si", 16, 6, "general"),
    ("di", 16, 7, "general"),
    ("cs", 16, 1, "segment"),
    ("ds", 16, 3, "segment"),
    ("es", 16, 0, "segment"),
    ("ss", 16, 2, "segment"),
    ("al", 8,  0, "general"),
    ("ah", 8,  4, "general"),
    ("bl", 8,  3, "general"),
    ("bh", 8,  7, "general"),
    ("cl", 8,  1, "general"),
    ("ch", 8,  5, "general"),
    ("dl", 8,  2, "general"),
    ("dh", 8,  6, "general"),
)

REGISTERS: Mapping[str, RegisterDescriptor] = MappingProxyType(
    {name: RegisterDescriptor(name, size, value, kind) for name, size, value, kind in _TABLE}
)

GENERAL_REGS: FrozenSet[str] = frozenset(n for n, d in REGISTERS.items() if d.kind == "general")
SEGMENT_REGS: FrozenSet[str] = frozenset(n for n, d in REGISTERS.items() if d.kind == "segment")

def is_reg(token: str) -> bool:
    """Indica si el token es el nombre de un registro conocido."""
    return token.strip().lower() in REGISTERS

def normalize_reg(token: str) -> str:
    """Devuelve el nombre canónico (minúsculas) o lanza ValueError."""
    t = token.strip().lower()
    if t in REGISTERS:
        return t
    raise ValueError(f"Registro inválido: {token}")

def reg_info(token: str) -> RegisterDescriptor:
    return REGISTERS[normalize_reg(token)]

def reg_num(token: str) -> int:
    """Valor de codificación 0..7 del registro."""
    return reg_info(token).value
