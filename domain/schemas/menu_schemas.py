from decimal import Decimal
from typing import Optional, List

from pydantic import Field

from domain.schemas.base import (
    APIModel,
    ApiDateTime,
    ApiDecimal,
    LenientDecimal,
    utcnow,
)


class Size(APIModel):
    """Drink size with its surcharge over the base price"""

    id: str
    name: str
    abbreviation: str
    additional_price: ApiDecimal = Decimal("0")
    is_default: bool = False
    order: int = 0


class Ingredient(APIModel):
    """Recipe ingredient; customizable ones can be adjusted between min and max"""

    id: Optional[str] = None
    name: str
    amount: float
    unit: str
    is_customizable: bool = False
    min_amount: Optional[float] = None
    max_amount: Optional[float] = None
    free_amount: Optional[float] = None
    price_per_unit: LenientDecimal = None

    @property
    def key(self) -> str:
        """Stable identifier, the id when present and the name otherwise"""
        return self.id or self.name


class CustomizationChoice(APIModel):
    id: str
    name: str
    price: LenientDecimal = None
    allow_quantity: bool = False
    default_quantity: Optional[int] = None
    max_quantity: Optional[int] = None
    price_per_additional_unit: LenientDecimal = None


class CustomizationOption(APIModel):
    """Group of choices such as milk type or syrups"""

    id: str
    name: str
    choices: List[CustomizationChoice] = Field(default_factory=list)
    required: bool = False
    allow_multiple_choices: bool = False

    def choice(self, choice_id: str) -> Optional[CustomizationChoice]:
        return next((c for c in self.choices if c.id == choice_id), None)


class MenuItem(APIModel):
    id: str
    name: str
    price: ApiDecimal
    description: Optional[str] = None
    image_url: Optional[str] = None
    is_available: bool = True
    ingredients: Optional[List[Ingredient]] = None
    customization_options: Optional[List[CustomizationOption]] = None
    has_multiple_sizes: Optional[bool] = None
    sizes: Optional[List[Size]] = None
    menu_group_id: Optional[str] = None
    created_at: ApiDateTime = Field(default_factory=utcnow)
    updated_at: ApiDateTime = Field(default_factory=utcnow)

    @property
    def default_size(self) -> Optional[Size]:
        if not self.sizes:
            return None
        return next((s for s in self.sizes if s.is_default), None)

    @property
    def sorted_sizes(self) -> List[Size]:
        return sorted(self.sizes or [], key=lambda s: s.order)

    @property
    def customizable_ingredients(self) -> List[Ingredient]:
        return [i for i in self.ingredients or [] if i.is_customizable]

    @property
    def is_customizable(self) -> bool:
        return bool(self.customizable_ingredients or self.customization_options)


class MenuGroup(APIModel):
    id: str
    name: str
    description: Optional[str] = None
    display_order: int = 0
    coffee_shop_id: Optional[str] = None
    menu_items: Optional[List[MenuItem]] = None
    created_at: ApiDateTime = Field(default_factory=utcnow)
    updated_at: ApiDateTime = Field(default_factory=utcnow)


# ============================================================================
# Request bodies
# ============================================================================


class MenuGroupCreate(APIModel):
    name: str
    description: Optional[str] = None
    display_order: int = 0
    coffee_shop_id: Optional[str] = None


class MenuGroupUpdate(APIModel):
    name: Optional[str] = None
    description: Optional[str] = None
    display_order: Optional[int] = None


class MenuItemCreate(APIModel):
    """Body of POST /menu-groups/{id}/items; price travels as a JSON number"""

    name: str
    price: ApiDecimal
    description: Optional[str] = None
    is_available: bool = True
    ingredients: Optional[List[Ingredient]] = None
    customization_options: Optional[List[CustomizationOption]] = None
    has_multiple_sizes: Optional[bool] = None
    sizes: Optional[List[Size]] = None
    menu_group_id: Optional[str] = None
