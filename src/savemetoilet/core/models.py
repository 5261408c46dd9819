from __future__ import annotations

from dataclasses import dataclass, field

MAX_PAGE_SIZE = 1000
SUCCESS_RESULT_CODE = "INFO-000"


@dataclass(frozen=True)
class ToiletRecord:
    poi_id: str
    name: str
    type_name: str
    category: str
    longitude: float | None
    latitude: float | None
    inserted_at: str
    updated_at: str


@dataclass(frozen=True)
class ResultStatus:
    code: str
    message: str

    @property
    def is_success(self) -> bool:
        return self.code == SUCCESS_RESULT_CODE


@dataclass(frozen=True)
class FetchRange:
    """Inclusive 1-based index window, as the Seoul open data API expects."""

    start: int
    end: int

    def __post_init__(self) -> None:
        if self.start < 1:
            raise ValueError(f"start must be >= 1, got {self.start}")
        if self.end < self.start:
            raise ValueError(f"end must be >= start, got {self.start}-{self.end}")
        if self.size > MAX_PAGE_SIZE:
            raise ValueError(f"range size must be <= {MAX_PAGE_SIZE}, got {self.size}")

    @property
    def size(self) -> int:
        return self.end - self.start + 1


@dataclass(frozen=True)
class PageResponse:
    total_count: int
    result: ResultStatus | None
    records: tuple[ToiletRecord, ...] = ()
    has_envelope: bool = True
    has_rows: bool = True


@dataclass(frozen=True)
class FetchDiagnostic:
    stage: str
    reason: str
    message: str
    fetch_range: FetchRange | None = None


@dataclass
class ToiletDataset:
    total_count: int = 0
    records: list[ToiletRecord] = field(default_factory=list)
    diagnostics: list[FetchDiagnostic] = field(default_factory=list)

    @property
    def complete(self) -> bool:
        return not self.diagnostics

    def extend(self, records: tuple[ToiletRecord, ...]) -> None:
        self.records.extend(records)
