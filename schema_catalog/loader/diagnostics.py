"""
Non-fatal problems reported alongside a successful load.
"""

from dataclasses import dataclass, field
from typing import Any


@dataclass
class Diagnostic:
    code: str
    message: str
    level: str = "warning"  # 'warning' or 'info'
    context: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "code": self.code,
            "message": self.message,
            "level": self.level,
            "context": dict(self.context),
        }
