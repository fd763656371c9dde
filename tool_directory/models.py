"""Domain entities produced from NocoDB records."""

from dataclasses import dataclass
from enum import Enum
from typing import List
from typing import Optional

from pydantic import BaseModel
from pydantic import ConfigDict
from pydantic import Field


class EntityKind(str, Enum):
    TOOL = "tool"
    BLOG_POST = "blog_post"


@dataclass(frozen=True)
class TableRef:
    """Table and view identifiers for one entity kind."""

    table_id: str
    view_id: str


class FAQItem(BaseModel):
    model_config = ConfigDict(frozen=True)

    question: str
    answer: str


class Tool(BaseModel):
    """A catalogued software product."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(min_length=1)
    name: str = ""
    description: str = ""
    banner_url: str = ""
    categories: str = Field("", description="Single free-text category label")
    date: str
    features: List[str] = Field(default_factory=list)
    advantage: List[str] = Field(default_factory=list)
    inconvenient: List[str] = Field(default_factory=list)
    source_url: List[str] = Field(default_factory=list)
    youtube_url: List[str] = Field(default_factory=list)
    image: List[str] = Field(default_factory=list)
    logo: str = ""
    tagline: str = ""
    pricing: str = ""
    website: str = ""
    rating: Optional[float] = None
    slug: str = Field("", description="Routing key used for detail lookups")
    faq: List[FAQItem] = Field(default_factory=list)


class BlogPost(BaseModel):
    """An editorial article."""

    model_config = ConfigDict(frozen=True)

    title: str
    content: str
    banner_url: str
    category: str
    slug: str
    date: str
    metadescription: str = ""
    faq: List[FAQItem] = Field(default_factory=list)
    strucured_schema: List[str] = Field(default_factory=list)
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
