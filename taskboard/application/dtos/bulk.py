"""DTOs for bulk task operations."""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class BulkItemResult:
    """Per-task outcome. error_code mirrors the domain exception's code on failure."""

    task_id: str
    success: bool
    error: str | None = None
    error_code: str | None = None


@dataclass(frozen=True)
class BulkApproveResult:
    """Aggregate over all attempts; reported only once every attempt has settled."""

    succeeded: int
    failed: int
    results: tuple[BulkItemResult, ...] = field(default_factory=tuple)
