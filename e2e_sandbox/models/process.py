"""Process teardown result model."""

from dataclasses import dataclass, field
from typing import List, Optional


@dataclass
class KillResult:
    """Outcome of signalling a sandbox process tree.

    ``kill`` reports failures through this value instead of raising: a
    process that is already gone, or could not be signalled, is logged and
    returned with ``error`` set.
    """

    pid: Optional[int]
    signal: str
    killed_pids: List[int] = field(default_factory=list)
    skipped: bool = False
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None
