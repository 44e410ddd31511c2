"""
Schema — Pydantic model for the machine-readable check result.

The document has exactly four fields, always in this order:
  type, variants, is_usable, problem.

External tooling diffs this output, so field names and order are a
stable contract.
"""
from typing import Dict, Optional

from pydantic import BaseModel, Field

from dif_check.core.dif_repr import DifRepr, DifType, dif_type, variants
from dif_check.policy.verdict import get_problem, is_usable


class DifCheckReport(BaseModel):
    """Check result for one debug information file."""

    type: DifType
    # hyphenated lowercase UUID → architecture label (null for mappings)
    variants: Dict[str, Optional[str]] = Field(default_factory=dict)
    is_usable: bool
    problem: Optional[str] = None

    @classmethod
    def from_dif(cls, dif: DifRepr) -> "DifCheckReport":
        return cls(
            type=dif_type(dif),
            variants={str(u): arch for u, arch in variants(dif).items()},
            is_usable=is_usable(dif),
            problem=get_problem(dif),
        )
