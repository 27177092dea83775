from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from tirestore.core.enums import UNKNOWN_MODEL, Row


class TireAttributes(BaseModel):
    """Physical attributes resolved from the catalog.

    ``width`` is in centimetres, the unit rack capacity is measured in.
    """

    model_config = ConfigDict(populate_by_name=True)

    brand: str
    model: str = UNKNOWN_MODEL
    width: float = Field(gt=0)
    aspect_ratio: int = Field(gt=0, alias="aspectRatio")
    diameter: int = Field(gt=0)


class Location(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    rack_id: str = Field(alias="rackId")
    row: Row


class TireUnit(BaseModel):
    """A stored tire. ``location`` is None only for unplaced units."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    catalog_code: str = Field(alias="eprelCode")
    brand: str
    model: str = UNKNOWN_MODEL
    width: float
    aspect_ratio: int = Field(alias="aspectRatio")
    diameter: int
    owner: str
    location: Optional[Location] = None

    def is_at(self, rack_id: str, row: Row) -> bool:
        """Check whether the tire is stored in the given rack row."""
        return (
            self.location is not None
            and self.location.rack_id == rack_id
            and self.location.row == row
        )


class PlaceTireRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    catalog_code: str = Field(default="", alias="eprelCode")


class DeleteTireResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    message: str
    deleted_tire: TireUnit = Field(alias="deletedTire")
