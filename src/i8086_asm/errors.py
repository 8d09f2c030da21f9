'''
errores de ensamblado; cada uno lleva su Diagnostic
'''

from __future__ import annotations
from typing import Optional

from .diagnostics import Diagnostic, error
from .operands import classify

class AsmError(Exception):
    """Base de todos los errores de ensamblado. Todos abortan el programa completo."""

    def __init__(self, diagnostic: Diagnostic):
        self.diagnostic = diagnostic
        super().__init__(str(diagnostic))

class TemplateNotFound(AsmError):
    """Ninguna plantilla acepta el mnemónico y la forma de los operandos."""

    def __init__(self, instruction, *, line: Optional[int] = None):
        self.instruction = instruction
        try:
            shape = ", ".join(classify(op) for op in instruction.operands)
        except (AttributeError, ValueError):
            shape = "?"
        super().__init__(error(
            f"No se pudo ensamblar la instrucción: {instruction} (operandos: {shape or 'ninguno'})",
            line=line if line is not None else getattr(instruction, "line", None),
            hint="revise el mnemónico, el número de operandos y sus tipos/rangos",
        ))

class InvalidMemoryOperand(AsmError):
    """Combinación de registros fuera de las ocho formas base/índice válidas."""

    def __init__(self, operand, *, line: Optional[int] = None):
        self.operand = operand
        super().__init__(error(
            f"Referencia a memoria incorrecta: {operand}",
            line=line,
            hint="combinaciones válidas: bx+si, bx+di, bp+si, bp+di, si, di, bp, bx",
        ))

class UnresolvedLabel(AsmError):
    """Etiqueta referenciada y nunca definida."""

    def __init__(self, name: str, *, line: Optional[int] = None):
        self.name = name
        super().__init__(error(f"Etiqueta no definida: {name}", line=line))

class DuplicateLabel(AsmError):
    """Etiqueta definida más de una vez."""

    def __init__(self, name: str, *, line: Optional[int] = None):
        self.name = name
        super().__init__(error(f"Etiqueta redefinida: {name}", line=line))

class OperandOutOfRange(AsmError):
    """Inmediato o desplazamiento que no cabe en el ancho que exige la codificación."""

    def __init__(self, value: int, width: int, *, line: Optional[int] = None, what: str = "Operando"):
        self.value = value
        self.width = width
        super().__init__(error(f"{what} fuera de rango para {width} bits: {value}", line=line))

class ProgramFormatError(AsmError):
    """Datos de programa mal formados (entrada del cargador)."""

    def __init__(self, message: str, *, line: Optional[int] = None, col: Optional[int] = None):
        super().__init__(error(message, line=line, col=col))
