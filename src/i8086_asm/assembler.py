from __future__ import annotations
import argparse, logging, sys
from dataclasses import dataclass, field
from typing import List, Optional

from .ast import Program
from .diagnostics import Diagnostic
from .errors import AsmError
from .linker import first_pass, resolve_labels
from .loader import load_program_file
from .writers import write_bin, write_hex

log = logging.getLogger(__name__)

@dataclass(frozen=True)
class AssemblyResult:
    """Resultado de ensamblar: bytes finales, o ningún byte y el error que abortó."""
    code: bytes = b""
    diagnostics: List[Diagnostic] = field(default_factory=list)
    error: Optional[AsmError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

def assemble_bytes(program: Program) -> bytes:
    """PASADA 1 (etiquetas + codificación) y PASADA 2 (desplazamientos relativos).
    Lanza el AsmError correspondiente si algo falla."""
    first = first_pass(program)
    return resolve_labels(first)

def assemble(program: Program, *, filename: str | None = None) -> AssemblyResult:
    """Como `assemble_bytes`, pero devuelve el error como valor; nunca hay salida parcial."""
    try:
        code = assemble_bytes(program)
    except AsmError as ex:
        log.debug("ensamblado abortado: %s", ex)
        return AssemblyResult(diagnostics=[ex.diagnostic.with_file(filename)], error=ex)
    return AssemblyResult(code=code)

def main(argv=None) -> int:
    ap = argparse.ArgumentParser(description="8086 (subconjunto 16 bits) table-driven assembler")
    ap.add_argument("source", help="programa estructurado en JSON")
    ap.add_argument("out_bin", help="imagen binaria plana de salida (p.ej. .com)")
    ap.add_argument("--hex", dest="out_hex", help="volcado hexadecimal opcional")
    ap.add_argument("-v", "--verbose", action="store_true", help="traza de las dos pasadas")
    args = ap.parse_args(argv)

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING,
                        format="%(levelname)s %(name)s: %(message)s")

    try:
        program = load_program_file(args.source)
    except AsmError as ex:
        print(ex.diagnostic.with_file(args.source), file=sys.stderr)
        return 1
    except (OSError, UnicodeDecodeError) as ex:
        print(f"ERROR: no pude leer {args.source}: {ex}", file=sys.stderr)
        return 2

    res = assemble(program, filename=args.source)
    for d in res.diagnostics:
        print(d, file=sys.stderr)
    if not res.ok:
        return 1

    try:
        write_bin(res.code, args.out_bin)
        if args.out_hex:
            write_hex(res.code, args.out_hex)
    except OSError as ex:
        print(f"ERROR al escribir salidas: {ex}", file=sys.stderr)
        return 3

    print(f"OK: {len(res.code)} bytes → {args.out_bin}")
    return 0

if __name__ == "__main__":
    raise SystemExit(main())
