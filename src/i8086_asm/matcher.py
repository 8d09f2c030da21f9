'''
búsqueda de la plantilla que encaja con una instrucción
'''

from __future__ import annotations
from typing import Optional, Sequence

from .ast import Instruction
from .conds import condition_code, is_cc_family
from .errors import TemplateNotFound
from .isa import TABLE, Template

def mnemonic_matches(mnemonic: str, template_mnemonic: str) -> bool:
    """Iguales (sin distinguir mayúsculas), o `mnemonic` es miembro de la familia jCC/setCC."""
    if is_cc_family(template_mnemonic):
        return condition_code(mnemonic, template_mnemonic) is not None
    return mnemonic.lower() == template_mnemonic.lower()

def instruction_matches(ins: Instruction, template: Template) -> bool:
    preds = template.pattern.operands
    if len(ins.operands) != len(preds):
        return False
    if not mnemonic_matches(ins.mnemonic, template.mnemonic):
        return False
    return all(p(op) for p, op in zip(preds, ins.operands))

def match(ins: Instruction, table: Sequence[Template] = TABLE) -> Optional[Template]:
    """Primera plantilla de `table` (en orden) que acepta `ins`, o None."""
    for t in table:
        if instruction_matches(ins, t):
            return t
    return None

def find_template(ins: Instruction, table: Sequence[Template] = TABLE) -> Template:
    """Como `match`, pero lanza TemplateNotFound si ninguna plantilla encaja."""
    t = match(ins, table)
    if t is None:
        raise TemplateNotFound(ins)
    return t
