# parallel-sets/src/parallel_sets/params.py
from __future__ import annotations

from typing import Any

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationInfo,
    field_validator,
    model_validator,
)

from . import _shared


class ParallelParams(BaseModel):
    """
    Layout parameters (validated, immutable).

      - method: parset | angle | adj.angle | hammock
      - alpha: ribbon fill transparency in [0, 1]
      - width: bar width in axis-slot units, 0 < width < 1
      - order: level-ordering flag(s), scalar or per variable (recycled)
      - ratio: widest line as a fraction of the display height
               (required for hammock and adj.angle)
      - asp: panel aspect ratio; hammock falls back to 1

    Text options mirror the label layer: offsets are in axis-slot units.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    method: str = "angle"
    alpha: float = Field(default=0.5, ge=0.0, le=1.0)
    width: float = Field(default=0.25, gt=0.0, lt=1.0)
    order: int | list[int] = 1
    ratio: float | None = Field(default=None, gt=0.0)
    asp: float | None = Field(default=None, gt=0.0)

    label: bool = True
    text_angle: float = 90.0
    text_offset: float | list[float] = 0.0
    text_colour: str = "grey20"
    text_size: float = Field(default=4.0, gt=0.0)
    text_shadow: bool = True
    text_shadow_colour: str = "grey90"
    text_shadow_size: float = Field(default=4.0, gt=0.0)
    text_shadow_x_offset: float = 0.01
    text_shadow_y_offset: float = 0.01

    @field_validator("method", mode="before")
    @classmethod
    def _method_canonical(cls, v: Any) -> str:
        return _shared.norm_method(v)

    @field_validator("order", mode="before")
    @classmethod
    def _order_flags(cls, v: Any) -> int | list[int]:
        if isinstance(v, (list, tuple)):
            if not v:
                raise ValueError("order must not be an empty sequence")
            return [_shared.norm_order_flag(x) for x in v]
        return _shared.norm_order_flag(v)

    @field_validator("text_offset", mode="before")
    @classmethod
    def _offset_list(cls, v: Any) -> float | list[float]:
        if v is None:
            return 0.0
        if isinstance(v, (list, tuple)):
            if not v:
                raise ValueError("text_offset must not be an empty sequence")
            return [float(x) for x in v]
        return v

    @field_validator("text_colour", "text_shadow_colour", mode="before")
    @classmethod
    def _colour_default(cls, v: Any, info: ValidationInfo) -> str:
        if v is None or not str(v).strip():
            return "grey20" if info.field_name == "text_colour" else "grey90"
        return str(v).strip()

    @model_validator(mode="after")
    def _method_requirements(self) -> ParallelParams:
        if self.method in _shared.RATIO_METHODS and self.ratio is None:
            raise ValueError(f"ratio required for method={self.method!r}")
        return self

    @property
    def aspect(self) -> float | None:
        """Effective aspect ratio (hammock defaults to 1)."""
        if self.asp is None and self.method == "hammock":
            return 1.0
        return self.asp
