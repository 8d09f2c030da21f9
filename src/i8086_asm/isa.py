'''
tabla formal de plantillas 8086 (patrón de operandos -> receta de bytes)
'''

from __future__ import annotations
from dataclasses import dataclass
from typing import Callable, Optional, Tuple, Union

from . import operands as ops
from .ast import Imm, Operand, Reg

# ---------------- Predicados de operando ----------------

@dataclass(frozen=True)
class Exact:
    """El operando debe ser exactamente este valor (p.ej. Imm(1) en 'sal rm8, 1')."""
    operand: Operand

    def __call__(self, op: Operand) -> bool:
        return op == self.operand

@dataclass(frozen=True)
class Classifier:
    """El operando debe pasar el test de clasificación `test`; `kind` lo nombra."""
    kind: str
    test: Callable[[Operand], bool]

    def __call__(self, op: Operand) -> bool:
        return self.test(op)

Predicate = Union[Exact, Classifier]

REG8  = Classifier("reg8",  ops.is_reg8)
REG16 = Classifier("reg16", ops.is_reg16)
SREG  = Classifier("sreg",  ops.is_sreg)
IMM8  = Classifier("imm8",  ops.is_imm8)
IMM16 = Classifier("imm16", ops.is_imm16)
RM8   = Classifier("rm8",   ops.is_rm8)
RM16  = Classifier("rm16",  ops.is_rm16)
LABEL = Classifier("label", ops.is_label)

# Clases que pueden ir en el campo rm del ModRM y clases inmediatas
RM_KINDS = ("rm8", "rm16", "reg8", "reg16")
IMM_KINDS = {"imm8": 8, "imm16": 16}

# ---------------- Descriptores de la receta de bytes ----------------

@dataclass(frozen=True)
class LiteralByte:
    value: int

@dataclass(frozen=True)
class RegisterOffsetOpcode:
    """Opcode base + valor del registro del operando `index` (push/pop/inc/mov r,imm)."""
    base: int
    index: int = 0

@dataclass(frozen=True)
class ConditionOffsetOpcode:
    """Opcode base + código de condición sacado del propio mnemónico."""
    base: int

@dataclass(frozen=True)
class ModRmWithExplicitField:
    """ModRM (+ desplazamiento) con el campo spare fijo (extensión de opcode /digit)."""
    spare: int

@dataclass(frozen=True)
class ModRmWithOperandRegister:
    """ModRM (+ desplazamiento) con el campo spare = valor del registro del operando `index`."""
    index: int

@dataclass(frozen=True)
class RelativeBranchPlaceholder:
    """Un byte de desplazamiento relativo, resuelto en la segunda pasada."""

@dataclass(frozen=True)
class Immediate8:
    pass

@dataclass(frozen=True)
class Immediate16:
    pass

ByteDesc = Union[LiteralByte, RegisterOffsetOpcode, ConditionOffsetOpcode,
                 ModRmWithExplicitField, ModRmWithOperandRegister,
                 RelativeBranchPlaceholder, Immediate8, Immediate16]

# ---------------- Plantillas ----------------

@dataclass(frozen=True)
class Pattern:
    mnemonic: str                     # 'mov', o de familia con 'CC' ('jCC', 'setCC')
    operands: Tuple[Predicate, ...]

@dataclass(frozen=True)
class Template:
    pattern: Pattern
    recipe: Tuple[ByteDesc, ...]

    @property
    def mnemonic(self) -> str:
        return self.pattern.mnemonic

    def operand_index(self, kinds) -> Optional[int]:
        """Índice del primer operando cuyo predicado es un Classifier de alguna de `kinds`."""
        for i, p in enumerate(self.pattern.operands):
            if isinstance(p, Classifier) and p.kind in kinds:
                return i
        return None

    def __str__(self) -> str:
        def _p(p: Predicate) -> str:
            return p.kind if isinstance(p, Classifier) else str(p.operand)
        return " ".join([self.mnemonic] + [_p(p) for p in self.pattern.operands])

def _pred(x) -> Predicate:
    if isinstance(x, (Exact, Classifier)):
        return x
    if isinstance(x, int):
        return Exact(Imm(x))
    if isinstance(x, str):
        return Exact(Reg(x))
    raise TypeError(f"Predicado no soportado: {x!r}")

def _desc(x) -> ByteDesc:
    return LiteralByte(x) if isinstance(x, int) else x

_TABLE = []

def _add(mnemonic: str, operands: tuple, recipe: tuple):
    _TABLE.append(Template(Pattern(mnemonic, tuple(_pred(o) for o in operands)),
                           tuple(_desc(b) for b in recipe)))

# Abreviaturas de la notación Intel: /digit, /r, +r, +cc, ib, iw, rb
def _d(n: int) -> ModRmWithExplicitField: return ModRmWithExplicitField(n)
def _r(i: int) -> ModRmWithOperandRegister: return ModRmWithOperandRegister(i)
def _rp(base: int, i: int = 0) -> RegisterOffsetOpcode: return RegisterOffsetOpcode(base, i)
def _ccp(base: int) -> ConditionOffsetOpcode: return ConditionOffsetOpcode(base)
IB, IW, RB = Immediate8(), Immediate16(), RelativeBranchPlaceholder()

# El orden importa: gana la primera plantilla que encaja.
_add("mov",   (REG8, IMM8),    (_rp(0xB0), IB))
_add("mov",   (REG16, IMM16),  (_rp(0xB8), IW))
_add("mov",   (SREG, RM16),    (0x8E, _r(0)))
_add("xor",   (RM8, REG8),     (0x30, _r(1)))
_add("xor",   (RM16, REG16),   (0x31, _r(1)))
_add("push",  (REG16,),        (_rp(0x50),))
_add("pop",   (REG16,),        (_rp(0x58),))
_add("stosb", (),              (0xAA,))
_add("ret",   (),              (0xC3,))
_add("inc",   (REG16,),        (_rp(0x40),))
_add("inc",   (REG8,),         (0xFE, _d(0)))
_add("cmp",   ("al", IMM8),    (0x3C, IB))
_add("cmp",   ("ax", IMM16),   (0x3D, IW))
_add("cmp",   (RM8, IMM8),     (0x80, _d(7), IB))
_add("cmp",   (RM16, IMM16),   (0x81, _d(7), IW))
_add("add",   ("al", IMM8),    (0x04, IB))
_add("add",   ("ax", IMM16),   (0x05, IW))
_add("add",   (RM8, IMM8),     (0x80, _d(0), IB))
# /7 (no /0) en add rm16, imm16 se conserva tal cual (ver DESIGN.md)
_add("add",   (RM16, IMM16),   (0x81, _d(7), IW))
_add("sal",   (RM8, 1),        (0xD0, _d(4)))
_add("sal",   (RM8, IMM8),     (0xC0, _d(4), IB))
_add("sal",   (RM16, 1),       (0xD1, _d(4)))
_add("sal",   (RM16, IMM8),    (0xC1, _d(4), IB))
_add("or",    (RM8, IMM8),     (0x80, _d(1), IB))
_add("or",    (RM16, IMM16),   (0x81, _d(1), IW))
_add("jCC",   (LABEL,),        (_ccp(0x70), RB))
# El campo spare 2 de setCC se conserva tal cual (ver DESIGN.md)
_add("setCC", (RM8,),          (0x0F, _ccp(0x90), _d(2)))
_add("loop",  (LABEL,),        (0xE2, RB))
_add("jmp",   (LABEL,),        (0xEB, RB))
_add("int",   (3,),            (0xCC,))
_add("int",   (IMM8,),         (0xCD, IB))

TABLE: Tuple[Template, ...] = tuple(_TABLE)
