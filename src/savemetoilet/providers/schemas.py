from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from savemetoilet.core.exceptions import UpstreamPayloadError
from savemetoilet.core.models import PageResponse, ResultStatus, ToiletRecord


class SeoulResult(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    code: str = Field(default="", alias="CODE")
    message: str = Field(default="", alias="MESSAGE")

    def to_status(self) -> ResultStatus:
        return ResultStatus(code=self.code, message=self.message)


class SeoulToiletRow(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    poi_id: str = Field(default="", alias="POI_ID")
    name: str = Field(default="", alias="FNAME")
    type_name: str = Field(default="", alias="ANAME")
    category: str = Field(default="", alias="CNAME")
    longitude: float | None = Field(default=None, alias="X_WGS84")
    latitude: float | None = Field(default=None, alias="Y_WGS84")
    inserted_at: str = Field(default="", alias="INSERTDATE")
    updated_at: str = Field(default="", alias="UPDATEDATE")

    @field_validator("poi_id", "name", "type_name", "category", "inserted_at", "updated_at", mode="before")
    @classmethod
    def _as_text(cls, value: Any) -> str:
        if value is None:
            return ""
        return str(value).strip()

    @field_validator("longitude", "latitude", mode="before")
    @classmethod
    def _blank_coordinate_is_missing(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    def to_record(self) -> ToiletRecord:
        return ToiletRecord(
            poi_id=self.poi_id,
            name=self.name,
            type_name=self.type_name,
            category=self.category,
            longitude=self.longitude,
            latitude=self.latitude,
            inserted_at=self.inserted_at,
            updated_at=self.updated_at,
        )


class SeoulToiletService(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    list_total_count: int = 0
    result: SeoulResult | None = Field(default=None, alias="RESULT")
    row: list[SeoulToiletRow] | None = None

    @field_validator("list_total_count", mode="before")
    @classmethod
    def _count_or_zero(cls, value: Any) -> int:
        # An unreadable count means nothing to walk.
        try:
            return max(int(value), 0)
        except (TypeError, ValueError):
            return 0


def parse_page(payload: Any, service_name: str) -> PageResponse:
    """Parse one decoded response body into a :class:`PageResponse`.

    The service answers "no data" and key errors with a bare top-level
    ``RESULT`` block instead of the service envelope, so a missing envelope
    is reported through ``has_envelope`` rather than raised.
    """
    if not isinstance(payload, dict):
        raise UpstreamPayloadError("seoul payload is not a json object")

    if payload.get(service_name) is None:
        result = None
        raw_result = payload.get("RESULT")
        if isinstance(raw_result, dict):
            try:
                result = SeoulResult.model_validate(raw_result).to_status()
            except ValidationError as exc:
                raise UpstreamPayloadError("seoul payload has an invalid RESULT block") from exc
        return PageResponse(total_count=0, result=result, has_envelope=False, has_rows=False)

    try:
        service = SeoulToiletService.model_validate(payload[service_name])
    except ValidationError as exc:
        raise UpstreamPayloadError(
            f"seoul payload does not match the {service_name} envelope: {exc.error_count()} error(s)"
        ) from exc

    rows = service.row
    return PageResponse(
        total_count=service.list_total_count,
        result=service.result.to_status() if service.result else None,
        records=tuple(row.to_record() for row in rows or ()),
        has_envelope=True,
        has_rows=rows is not None,
    )
