"""Product catalog models and providers.

The catalog is a constant built at import time. Routes depend on the
ProductProvider protocol so a real data source can replace StaticCatalog
without touching caching or routing.
"""

from typing import Protocol, Sequence

from pydantic import BaseModel, ConfigDict, Field


class Category(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: int = Field(gt=0)
    name: str = Field(min_length=1)


class Product(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: int = Field(gt=0)
    name: str = Field(min_length=1)
    price: float = Field(ge=0)
    stock: int = Field(ge=0)
    category: Category


class ProductProvider(Protocol):
    def list_products(self) -> Sequence[Product]: ...


# In a production deployment this would come from a database.
CATALOG: tuple[Product, ...] = (
    Product(
        id=1,
        name="Laptop",
        price=1200.50,
        stock=25,
        category=Category(id=101, name="Electronics"),
    ),
    Product(
        id=2,
        name="Headphones",
        price=50.00,
        stock=100,
        category=Category(id=102, name="Accessories"),
    ),
)


class StaticCatalog:
    """Serves the fixed in-memory catalog."""

    def __init__(self, products: Sequence[Product] = CATALOG):
        self._products = tuple(products)

    def list_products(self) -> Sequence[Product]:
        return self._products


def render_catalog(products: Sequence[Product]) -> list[dict]:
    """Shape products into JSON-ready dicts with the category embedded."""
    return [product.model_dump(mode="json") for product in products]
