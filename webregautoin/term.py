"""
Term codes - map a code like 'SP22' to its WebReg sequence id.
"""

from __future__ import annotations

from webregautoin.models import TermContext

# prefix -> (base sequence id, base two-digit year)
TERM_ARR: dict[str, tuple[int, int]] = {
    "SP": (5200, 22),  # SP22
    "S1": (5210, 22),  # S122
    "S2": (5220, 22),  # S222
    "S3": (5230, 22),  # S322
    "SU": (5240, 22),  # SU22
    "FA": (5250, 22),  # FA22
    "WI": (5260, 23),  # WI23
}

# Sequence ids advance by this much per academic year
SEQ_IDS_PER_YEAR = 70


def get_term_seq_id(term_year: str) -> int:
    """
    Get the sequence id of a term code.

    Returns 0 for a code of the wrong length, an unknown prefix, or a
    non-numeric year.
    """
    if len(term_year) != 4:
        return 0

    term = term_year[:2]
    if term not in TERM_ARR:
        return 0

    year_part = term_year[2:]
    if not (year_part.isascii() and year_part.isdigit()):
        return 0

    base_seq_id, base_year = TERM_ARR[term]
    return SEQ_IDS_PER_YEAR * (int(year_part) - base_year) + base_seq_id


def term_context(term_year: str) -> TermContext:
    """Build a TermContext, raising ValueError for an unrecognized code."""
    code = term_year.upper()
    seq_id = get_term_seq_id(code)
    if seq_id == 0:
        raise ValueError(f"Invalid term code: {term_year!r}")
    return TermContext(seq_id=seq_id, term_name=code)
