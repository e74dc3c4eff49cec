from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional


@dataclass
class DispatchConfig:
    """Settings for one dispatcher instance.

    ``strict_claims`` selects the claim-conflict policy: raise
    ``ClaimConflictError`` (debug) or log and refuse the commit (production).
    """

    picker: str = "ahead"
    picker_options: Dict[str, Any] = field(default_factory=dict)
    strict_claims: bool = True
    seed: Optional[int] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DispatchConfig":
        config = cls(
            picker=data.get("picker", "ahead"),
            picker_options=dict(data.get("options", {})),
            strict_claims=data.get("strict_claims", True),
            seed=data.get("seed"),
        )
        config.validate()
        return config

    def validate(self) -> None:
        if not self.picker:
            raise ValueError("dispatch.picker cannot be empty")
        if not isinstance(self.strict_claims, bool):
            raise ValueError(f"dispatch.strict_claims must be true or false, got {self.strict_claims!r}")
        if self.seed is not None and (isinstance(self.seed, bool) or not isinstance(self.seed, int)):
            raise ValueError(f"dispatch.seed must be an integer, got {self.seed!r}")
