from pydantic import BaseModel, ConfigDict, Field, model_validator
from typing import List, Optional

from crisis_updates.core.exceptions import NotFound

U64_MAX = 2**64 - 1


class CrisisUpdatePayload(BaseModel):
    """Caller-supplied fields for creating or updating a crisis update"""
    model_config = ConfigDict(extra="forbid")

    title: str
    description: str
    location: str


class CrisisUpdate(BaseModel):
    id: int = Field(..., ge=0, le=U64_MAX)
    title: str
    description: str
    location: str
    timestamp: int = Field(..., ge=0, le=U64_MAX, description="Nanoseconds since the Unix epoch")


class NotFoundDetail(BaseModel):
    msg: str


class CrisisUpdateError(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    not_found: NotFoundDetail = Field(..., alias="NotFound")


class CrisisUpdateResult(BaseModel):
    """
    Tagged union returned by the get/update/delete operations.
    Serialises as {"Ok": record} or {"Err": {"NotFound": {"msg": ...}}}.
    """
    model_config = ConfigDict(populate_by_name=True)

    ok: Optional[CrisisUpdate] = Field(default=None, alias="Ok")
    err: Optional[CrisisUpdateError] = Field(default=None, alias="Err")

    @model_validator(mode="after")
    def exactly_one_variant(self):
        if (self.ok is None) == (self.err is None):
            raise ValueError("result must carry exactly one of Ok or Err")
        return self

    @classmethod
    def success(cls, record: CrisisUpdate) -> "CrisisUpdateResult":
        return cls(ok=record)

    @classmethod
    def not_found(cls, exc: NotFound) -> "CrisisUpdateResult":
        return cls(err=CrisisUpdateError(not_found=NotFoundDetail(msg=exc.msg)))

    @property
    def is_ok(self) -> bool:
        return self.ok is not None

    def unwrap(self) -> CrisisUpdate:
        if self.ok is None:
            raise NotFound(self.err.not_found.msg)
        return self.ok

    def to_wire(self) -> dict:
        return self.model_dump(by_alias=True, exclude_none=True)


class StoreSnapshot(BaseModel):
    """Point-in-time copy of a store: the id counter plus every live record"""
    next_id: int = Field(1, ge=1)
    records: List[CrisisUpdate] = Field(default_factory=list)
