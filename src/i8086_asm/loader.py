# src/i8086_asm/loader.py
from __future__ import annotations
import json
from typing import Any, List

from .ast import Imm, Instruction, Label, Mem, Node, Operand, Reg, Sym
from .errors import ProgramFormatError
from .regs import is_reg, normalize_reg

def _is_int(x: Any) -> bool:
    return isinstance(x, int) and not isinstance(x, bool)

def load_operand(data: Any, *, line: int | None = None) -> Operand:
    """
    Convierte un operando en forma de datos:
      - "ax"               -> Reg
      - 5                  -> Imm
      - ["bx", "si", 4]    -> Mem (los enteros se suman al desplazamiento)
      - "loop" / {"label": "loop"} -> Sym
    """
    if _is_int(data):
        return Imm(data)
    if isinstance(data, str):
        if is_reg(data):
            return Reg(normalize_reg(data))
        return Sym(data)
    if isinstance(data, list):
        regs: List[str] = []
        disp = 0
        for part in data:
            if _is_int(part):
                disp += part
            elif isinstance(part, str) and is_reg(part):
                regs.append(normalize_reg(part))
            else:
                raise ProgramFormatError(f"Componente de memoria inválido: {part!r}", line=line)
        return Mem(regs=tuple(regs), disp=disp)
    if isinstance(data, dict) and set(data) == {"label"} and isinstance(data["label"], str):
        return Sym(data["label"])
    raise ProgramFormatError(f"Operando inválido: {data!r}", line=line)

def load_node(data: Any, *, line: int | None = None) -> Node:
    if isinstance(data, str) and data.endswith(":") and len(data) > 1:
        return Label(name=data[:-1], line=line)
    if isinstance(data, dict) and set(data) == {"label"} and isinstance(data["label"], str):
        return Label(name=data["label"], line=line)
    if isinstance(data, list) and data and isinstance(data[0], str):
        if len(data) > 3:
            raise ProgramFormatError("Una instrucción admite como mucho 2 operandos", line=line)
        operands = [load_operand(o, line=line) for o in data[1:]]
        return Instruction(mnemonic=data[0].lower(), operands=operands, line=line)
    raise ProgramFormatError(f"Elemento de programa inválido: {data!r}", line=line)

def load_program(data: Any) -> List[Node]:
    """Programa estructurado a partir de una lista de elementos (p.ej. JSON ya decodificado).

    Cada elemento es una etiqueta ("nombre:" o {"label": "nombre"}) o una
    instrucción [mnemónico, operando...]. `line` de cada nodo es su posición (1..N).
    """
    if not isinstance(data, list):
        raise ProgramFormatError("El programa debe ser una lista de elementos")
    return [load_node(item, line=i) for i, item in enumerate(data, start=1)]

def load_program_file(path: str) -> List[Node]:
    with open(path, "r", encoding="utf-8") as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as ex:
            raise ProgramFormatError(f"JSON inválido: {ex.msg}", line=ex.lineno, col=ex.colno) from ex
    return load_program(data)
