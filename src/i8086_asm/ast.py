'''
dataclases del programa estructurado (Instruction, Label, Operand)
'''

from __future__ import annotations
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple, Union

from .regs import REGISTERS, RegisterDescriptor

# ---- Nodos del programa ----

@dataclass(frozen=True)
class Label:
    """Definición de etiqueta: marca el offset actual con un nombre."""
    name: str
    line: Optional[int] = None

@dataclass(frozen=True)
class Instruction:
    """Instrucción con mnemónico (quizá de familia, p.ej. 'jne') y 0..2 operandos."""
    mnemonic: str
    operands: List['Operand'] = field(default_factory=list)
    line: Optional[int] = None

    def __str__(self) -> str:
        ops = ", ".join(str(o) for o in self.operands)
        return f"{self.mnemonic} {ops}".strip()

# ---- Operandos ----

@dataclass(frozen=True)
class Reg:
    """Registro por nombre canónico ('ax', 'bl', 'ds', ...)."""
    name: str

    @property
    def info(self) -> RegisterDescriptor:
        return REGISTERS[self.name]

    def __str__(self) -> str:
        return self.name

@dataclass(frozen=True)
class Imm:
    """Inmediato entero."""
    value: int

    def __str__(self) -> str:
        return str(self.value)

@dataclass(frozen=True)
class Mem:
    """Referencia a memoria: hasta dos registros base/índice más un desplazamiento.

    Sin registros, `disp` es la dirección absoluta (direccionamiento directo).
    """
    regs: Tuple[str, ...] = ()
    disp: int = 0

    def __str__(self) -> str:
        parts = list(self.regs)
        if self.disp or not parts:
            parts.append(str(self.disp))
        return "[" + "+".join(parts) + "]"

@dataclass(frozen=True)
class Sym:
    """Referencia simbólica a una etiqueta."""
    name: str

    def __str__(self) -> str:
        return self.name

Operand = Union[Reg, Imm, Mem, Sym]
Node = Union[Label, Instruction]
Program = Sequence[Node]

# ---- Constructor cómodo ----

def ins(mnemonic: str, *operands: Operand, line: Optional[int] = None) -> Instruction:
    return Instruction(mnemonic=mnemonic.lower(), operands=list(operands), line=line)
