"""Custom design models"""

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator, model_validator

MIN_SCALE = 0.5
MAX_SCALE = 2.0


class DesignPosition(str, Enum):
    """Printable area on a garment"""
    FRONT = "front"
    BACK = "back"
    LEFT_SLEEVE = "left_sleeve"
    RIGHT_SLEEVE = "right_sleeve"


class Offset(BaseModel):
    """Design offset from the centre of the print area, in percent"""
    model_config = ConfigDict(extra="forbid", frozen=True)

    x: float = 0.0
    y: float = 0.0


class CustomPart(BaseModel):
    """
    Design placed on one position.

    ``applied`` is derived from the content: a part with neither an image
    nor non-blank text is not applied, whatever the client claims.
    """
    model_config = ConfigDict(extra="forbid", frozen=True)

    image_url: Optional[str] = None
    text: str = ""
    offset: Offset = Field(default_factory=Offset)
    scale: float = 1.0

    @model_validator(mode="before")
    @classmethod
    def _drop_derived_fields(cls, data: Any) -> Any:
        if isinstance(data, dict):
            data = {
                k: v for k, v in data.items()
                if k not in ("applied", "has_image", "has_text")
            }
        return data

    @field_validator("scale")
    @classmethod
    def _clamp_scale(cls, value: float) -> float:
        return max(MIN_SCALE, min(MAX_SCALE, value))

    @field_validator("image_url")
    @classmethod
    def _blank_image_is_none(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and not value.strip():
            return None
        return value

    @computed_field
    @property
    def has_image(self) -> bool:
        return self.image_url is not None

    @computed_field
    @property
    def has_text(self) -> bool:
        return bool(self.text.strip())

    @computed_field
    @property
    def applied(self) -> bool:
        return self.has_image or self.has_text


class Customization(BaseModel):
    """Designs for a cart line, keyed by position"""
    model_config = ConfigDict(extra="forbid", frozen=True)

    parts: dict[DesignPosition, CustomPart] = Field(default_factory=dict)

    def part(self, position: DesignPosition) -> CustomPart:
        """Part at ``position``, blank when none was supplied"""
        return self.parts.get(position) or CustomPart()
