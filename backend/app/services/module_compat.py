"""
Legacy module identifier normalisation.

Older builds stored letter-based module codes (A1, B2, ...) and question ids
prefixed with them (B4.1-F-2). Current catalogs use numbered ids (2.1, 3.5, ...).
"""
from typing import List

MODULE_CODE_MAP = {
    "B1": "1.1", "B4.1": "1.2", "B4.2": "1.3", "B4.3": "1.4", "B5": "1.5", "B6": "1.6",
    "A1": "2.1", "A2": "2.2", "A3": "2.3", "A3a": "2.3", "A3b": "2.4",
    "A4": "3.1", "A5": "3.2", "A6": "3.3", "A6a": "3.4", "B2": "3.5", "B3": "3.6", "D1": "3.7",
    "S1": "4.1", "C1": "4.2", "C2": "4.3", "A7": "4.4", "C3": "4.5", "C4": "4.6", "S5": "4.7",
    "P1": "5.1", "P2": "5.2", "P3": "5.3", "P4": "5.4", "P5": "5.5",
    "E1": "6.1", "E2": "6.2", "E3": "6.3", "E4": "6.4", "E5": "6.5",
}

# Longest first so B4.1 matches before B4 and A3a before A3
_SORTED_LEGACY_CODES = sorted(MODULE_CODE_MAP, key=len, reverse=True)


def normalize_module_code(code: str) -> str:
    return MODULE_CODE_MAP.get(code, code)


def normalize_question_id(question_id: str) -> str:
    """Replace a legacy module prefix on a question id ("B4.1-F-2" -> "1.2-F-2")."""
    for legacy in _SORTED_LEGACY_CODES:
        if question_id.startswith(legacy + "-"):
            return MODULE_CODE_MAP[legacy] + question_id[len(legacy):]
    return question_id


def normalize_module_codes(codes: List[str]) -> List[str]:
    """Normalise a list of codes, keeping the first occurrence when two collapse to one id."""
    normalized: List[str] = []
    for code in codes:
        new_code = normalize_module_code(code)
        if new_code not in normalized:
            normalized.append(new_code)
    return normalized
