'''
bit-twiddling (rangos con/sin signo, little-endian, hex)
'''

from __future__ import annotations
from typing import List

def is_unsigned_nbit(x: int, n: int) -> bool:
    """Devuelve True si x está en [0, 2^n) (sin signo de n bits)."""
    if n <= 0:
        raise ValueError("n debe ser positivo")
    return 0 <= x < (1 << n)

def is_signed_nbit(x: int, n: int) -> bool:
    """Devuelve True si x está en [-(2^(n-1)), 2^(n-1)-1] (con signo de n bits)."""
    if n <= 0:
        raise ValueError("n debe ser positivo")
    lo = -(1 << (n - 1))
    hi = (1 << (n - 1)) - 1
    return lo <= x <= hi

def fits_nbit(x: int, n: int) -> bool:
    """True si x se puede escribir en n bits, ya sea con o sin signo."""
    return is_signed_nbit(x, n) or is_unsigned_nbit(x, n)

def le_bytes(x: int, bits: int) -> List[int]:
    """Bytes little-endian de x en 'bits' bits; los negativos se ajustan sumando 2^bits."""
    if bits % 8 != 0:
        raise ValueError("bits debe ser múltiplo de 8")
    if x < 0:
        x += 1 << bits
    return [(x >> shift) & 0xFF for shift in range(0, bits, 8)]

def to_hex8(x: int, *, prefix: bool = False) -> str:
    """Representación hexadecimal de un byte (cadena), con o sin prefijo 0x."""
    s = format(x & 0xFF, "02x")
    return ("0x" + s) if prefix else s
