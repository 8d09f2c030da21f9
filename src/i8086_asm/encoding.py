# src/i8086_asm/encoding.py
from __future__ import annotations
from typing import List, Optional, Union

from .ast import Instruction, Mem, Operand, Reg, Sym
from .conds import condition_code
from .errors import InvalidMemoryOperand, OperandOutOfRange, TemplateNotFound
from .isa import (
    IMM_KINDS, RM_KINDS, ByteDesc, ConditionOffsetOpcode, Immediate8, Immediate16,
    LiteralByte, ModRmWithExplicitField, ModRmWithOperandRegister,
    RegisterOffsetOpcode, RelativeBranchPlaceholder, Template,
)
from .matcher import find_template
from .utils import fits_nbit, is_signed_nbit, le_bytes

# Una celda de salida: byte ya resuelto o marca de etiqueta pendiente (1 byte)
Cell = Union[int, Sym]

# ---------------- ModRM ----------------

# Combinación (ordenada) de registros base/índice -> campo rm.
# La dirección directa () comparte rm=6 con [bp]; las distingue mod.
RM_MAP = {
    ("bx", "si"): 0,
    ("bx", "di"): 1,
    ("bp", "si"): 2,
    ("bp", "di"): 3,
    ("si",): 4,
    ("di",): 5,
    ("bp",): 6,
    (): 6,
    ("bx",): 7,
}

def modrm(mod: int, spare: int, rm: int) -> int:
    """Empaqueta mod(2) | spare(3) | rm(3)."""
    return ((mod & 0x3) << 6) | ((spare & 0x7) << 3) | (rm & 0x7)

def make_modrm(operand: Operand, spare: int, *, line: Optional[int] = None) -> List[int]:
    """Byte ModRM más los bytes de desplazamiento para un operando registro o memoria."""
    if isinstance(operand, Reg):
        return [modrm(3, spare, operand.info.value)]
    if not isinstance(operand, Mem):
        raise InvalidMemoryOperand(operand, line=line)

    regs = tuple(sorted(r.lower() for r in operand.regs))
    rm = RM_MAP.get(regs)
    if rm is None:
        raise InvalidMemoryOperand(operand, line=line)
    disp = operand.disp

    if not regs:
        # Dirección directa: mod=0 y siempre 2 bytes de dirección
        if not fits_nbit(disp, 16):
            raise OperandOutOfRange(disp, 16, line=line, what="Dirección")
        return [modrm(0, spare, rm)] + le_bytes(disp, 16)

    if disp == 0 and regs != ("bp",):
        mod = 0
    elif is_signed_nbit(disp, 8):
        # [bp] sin desplazamiento cae aquí: mod=0,rm=6 es la dirección directa
        mod = 1
    elif is_signed_nbit(disp, 16):
        mod = 2
    else:
        raise OperandOutOfRange(disp, 16, line=line, what="Desplazamiento")
    return [modrm(mod, spare, rm)] + le_bytes(disp, 8 * mod)

# ---------------- Codificador de una instrucción ----------------

def _operand(ins: Instruction, template: Template, kinds) -> Operand:
    i = template.operand_index(kinds)
    if i is None:
        raise TemplateNotFound(ins)
    return ins.operands[i]

def _rm_operand(ins: Instruction, template: Template, skip: Optional[int]) -> Operand:
    for i, p in enumerate(template.pattern.operands):
        if i != skip and getattr(p, "kind", None) in RM_KINDS:
            return ins.operands[i]
    raise TemplateNotFound(ins)

def _reg_value(ins: Instruction, index: int) -> int:
    op = ins.operands[index]
    if not isinstance(op, Reg):
        raise TemplateNotFound(ins)
    return op.info.value

def _immediate(ins: Instruction, template: Template, width: int) -> List[int]:
    op = _operand(ins, template, IMM_KINDS)
    value = op.value  # type: ignore[union-attr]
    if not fits_nbit(value, width):
        raise OperandOutOfRange(value, width, line=ins.line, what="Inmediato")
    return le_bytes(value, width)

def encode_byte(ins: Instruction, template: Template, desc: ByteDesc) -> List[Cell]:
    """Celdas que produce un único descriptor de la receta."""
    if isinstance(desc, LiteralByte):
        return [desc.value]
    if isinstance(desc, RegisterOffsetOpcode):
        return [desc.base + _reg_value(ins, desc.index)]
    if isinstance(desc, ConditionOffsetOpcode):
        cc = condition_code(ins.mnemonic, template.mnemonic)
        if cc is None:
            raise TemplateNotFound(ins)
        return [desc.base + cc]
    if isinstance(desc, ModRmWithExplicitField):
        return make_modrm(_rm_operand(ins, template, None), desc.spare, line=ins.line)
    if isinstance(desc, ModRmWithOperandRegister):
        spare = _reg_value(ins, desc.index)
        return make_modrm(_rm_operand(ins, template, desc.index), spare, line=ins.line)
    if isinstance(desc, RelativeBranchPlaceholder):
        target = _operand(ins, template, ("label",))
        return [target]  # type: ignore[list-item]
    if isinstance(desc, Immediate8):
        return _immediate(ins, template, 8)
    if isinstance(desc, Immediate16):
        return _immediate(ins, template, 16)
    raise TypeError(f"Descriptor de byte desconocido: {desc!r}")

def encode_instruction(ins: Instruction, template: Optional[Template] = None) -> List[Cell]:
    """Bytes de una instrucción; las ramas relativas dejan un Sym en su byte de desplazamiento."""
    if template is None:
        template = find_template(ins)
    out: List[Cell] = []
    for desc in template.recipe:
        out.extend(encode_byte(ins, template, desc))
    return out
