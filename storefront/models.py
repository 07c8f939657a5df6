# storefront/models.py
from enum import Enum
from typing import Annotated, NamedTuple, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class Origin(str, Enum):
    REMOTE = "remote"
    LOCAL = "local"


class ProductKey(NamedTuple):
    """Tagged identity of a product.

    ``number`` is the upstream id for remote products and the local
    sequence number for local ones. Only the wire id is an integer shared
    by both origins.
    """
    origin: Origin
    number: int


class _ProductBase(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: int
    name: str = Field(min_length=1)
    price: float = Field(ge=0)
    image_url: str = Field(alias="imageUrl")
    category: str = ""
    description: Optional[str] = None


class RemoteProduct(_ProductBase):
    origin: Literal["remote"] = "remote"

    @property
    def key(self) -> ProductKey:
        return ProductKey(Origin.REMOTE, self.id)


class LocalProduct(_ProductBase):
    origin: Literal["local"] = "local"
    seq: int = Field(ge=0)

    @property
    def key(self) -> ProductKey:
        return ProductKey(Origin.LOCAL, self.seq)


Product = Annotated[Union[RemoteProduct, LocalProduct], Field(discriminator="origin")]
