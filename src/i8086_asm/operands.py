'''
clasificación de operandos (predicados puros usados por las plantillas)
'''

from __future__ import annotations

from .ast import Imm, Mem, Operand, Reg, Sym
from .regs import REGISTERS
from .utils import is_unsigned_nbit

def _reg(op: Operand, kind: str, size: int | None = None) -> bool:
    if not isinstance(op, Reg):
        return False
    info = REGISTERS.get(op.name)
    if info is None or info.kind != kind:
        return False
    return size is None or info.size == size

def is_reg8(op: Operand) -> bool:
    return _reg(op, "general", 8)

def is_reg16(op: Operand) -> bool:
    return _reg(op, "general", 16)

def is_sreg(op: Operand) -> bool:
    return _reg(op, "segment")

def is_imm8(op: Operand) -> bool:
    return isinstance(op, Imm) and is_unsigned_nbit(op.value, 8)

def is_imm16(op: Operand) -> bool:
    return isinstance(op, Imm) and is_unsigned_nbit(op.value, 16)

def is_mem(op: Operand) -> bool:
    """Chequeo estructural: la validez de la combinación se comprueba al codificar."""
    return (isinstance(op, Mem)
            and all(isinstance(r, str) for r in op.regs)
            and isinstance(op.disp, int))

def is_rm8(op: Operand) -> bool:
    return is_reg8(op) or is_mem(op)

def is_rm16(op: Operand) -> bool:
    return is_reg16(op) or is_mem(op)

def is_label(op: Operand) -> bool:
    return isinstance(op, Sym)

def classify(op: Operand) -> str:
    """Clase gruesa del operando ('reg', 'sreg', 'imm', 'mem', 'label'), para mensajes."""
    if is_reg8(op) or is_reg16(op):
        return "reg"
    if is_sreg(op):
        return "sreg"
    if isinstance(op, Imm):
        return "imm"
    if is_mem(op):
        return "mem"
    if is_label(op):
        return "label"
    raise ValueError(f"Operando desconocido: {op!r}")
