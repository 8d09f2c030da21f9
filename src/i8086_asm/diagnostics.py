'''
clase Diagnostic y helper de error (posición en el programa, mensaje, pista)
'''

from __future__ import annotations
from dataclasses import dataclass
from typing import Optional, Literal

# Los errores de ensamblado son fatales: solo existe la severidad "error"
Severity = Literal["error"]

@dataclass(frozen=True)
class Diagnostic:
    """Diagnóstico asociado a un fallo de ensamblado.

    `line` es la posición del elemento dentro del programa (1 = primero) cuando
    se conoce; `hint` orienta la corrección.
    """
    severity: Severity
    message: str
    line: Optional[int] = None
    col: Optional[int] = None
    hint: Optional[str] = None
    file: Optional[str] = None

    def __str__(self) -> str:
        loc = ""
        if self.file is not None:
            loc += f"{self.file}:"
        if self.line is not None:
            loc += f"{self.line}"
            if self.col is not None:
                loc += f":{self.col}"
        if loc:
            loc += ": "
        core = f"{self.severity.upper()}: {self.message}"
        if self.hint:
            core += f"  (pista: {self.hint})"
        return loc + core

    def with_file(self, file: Optional[str]) -> "Diagnostic":
        """Copia del diagnóstico con el nombre de archivo indicado."""
        return Diagnostic(self.severity, self.message, self.line, self.col, self.hint, file)

def error(message: str, *, line: int | None = None, col: int | None = None,
          file: str | None = None, hint: str | None = None) -> Diagnostic:
    """Crea un diagnóstico de tipo error."""
    return Diagnostic("error", message, line, col, hint, file)
