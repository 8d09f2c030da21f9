'''
códigos de condición (sufijo -> código de 4 bits) y extracción desde mnemónicos jCC/setCC
'''

from __future__ import annotations
from types import MappingProxyType
from typing import Mapping, Optional

# Marcador que ocupa el lugar de la condición en los mnemónicos de familia
CC_PLACEHOLDER = "CC"

# Sinónimos -> código. Los sinónimos comparten código con su forma canónica.
CONDITION_CODES: Mapping[str, int] = MappingProxyType({
    "o": 0, "no": 1,
    "b": 2, "c": 2, "nae": 2,
    "ae": 3, "nb": 3, "nc": 3,
    "e": 4, "z": 4,
    "ne": 5, "nz": 5,
    "be": 6, "na": 6,
    "a": 7, "nbe": 7,
    "s": 8, "ns": 9,
    "p": 10, "pe": 10,
    "np": 11, "po": 11,
    "l": 12, "nge": 12,
    "ge": 13, "nl": 13,
    "le": 14, "ng": 14,
    "g": 15, "nle": 15,
})

def is_cc_family(template_mnemonic: str) -> bool:
    """True si el mnemónico de plantilla representa una familia (contiene 'CC')."""
    return CC_PLACEHOLDER in template_mnemonic

def extract_cc(mnemonic: str, template_mnemonic: str) -> Optional[str]:
    """Sufijo de condición de `mnemonic` respecto de la plantilla (p.ej. 'jne' vs 'jCC' -> 'ne').

    Se quita el prefijo y el sufijo fijos de la plantilla; el texto restante solo
    se devuelve si es un sinónimo conocido. En otro caso devuelve None.
    """
    if not is_cc_family(template_mnemonic):
        return None
    prefix, _, suffix = template_mnemonic.partition(CC_PLACEHOLDER)
    prefix, suffix = prefix.lower(), suffix.lower()
    m = mnemonic.lower()
    if not (m.startswith(prefix) and m.endswith(suffix)):
        return None
    cc = m[len(prefix):len(m) - len(suffix)]
    if cc not in CONDITION_CODES:
        return None
    return cc

def condition_code(mnemonic: str, template_mnemonic: str) -> Optional[int]:
    """Código 0..15 de la condición incluida en `mnemonic`, o None."""
    cc = extract_cc(mnemonic, template_mnemonic)
    return None if cc is None else CONDITION_CODES[cc]
