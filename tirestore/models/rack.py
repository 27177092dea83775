from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from tirestore.models.tire import TireUnit


class RackCreate(BaseModel):
    """Input for a new rack. Checked by the registry, not here."""

    model_config = ConfigDict(populate_by_name=True)

    name: str = ""
    total_width: float = Field(alias="totalWidth")
    is_double: bool = Field(default=False, alias="isDouble")
    reserved_brand: Optional[str] = Field(default=None, alias="reservedForBrand")


class Rack(BaseModel):
    """A storage rack. Immutable once created."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    id: str
    name: str
    total_width: float = Field(alias="totalWidth")
    is_double: bool = Field(default=False, alias="isDouble")
    reserved_brand: Optional[str] = Field(default=None, alias="reservedForBrand")
    owner: str

    def accepts_brand(self, brand: str) -> bool:
        """A rack without a reservation takes every brand."""
        return not self.reserved_brand or self.reserved_brand == brand.upper()


class RackView(Rack):
    """Rack plus its current contents, computed at read time."""

    front_row_tires: list[TireUnit] = Field(default_factory=list, alias="frontRowTires")
    back_row_tires: list[TireUnit] = Field(default_factory=list, alias="backRowTires")
    front_occupied_width: float = Field(default=0.0, alias="frontOccupiedWidth")
    back_occupied_width: float = Field(default=0.0, alias="backOccupiedWidth")
    front_free_width: float = Field(default=0.0, alias="frontFreeWidth")
    back_free_width: float = Field(default=0.0, alias="backFreeWidth")
