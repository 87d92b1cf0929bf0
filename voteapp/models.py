from typing import Dict, List, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from .config import DEFAULT_CATEGORY


class CamelModel(BaseModel):
    """
    Stored and wire records use camelCase keys (createdAt, imageUrl, optionId);
    Python code uses the snake_case attribute names.
    """
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Option(BaseModel):
    id: str
    text: str = Field(..., min_length=1)
    votes: int = Field(0, ge=0)


class Poll(CamelModel):
    id: str
    question: str = Field(..., min_length=1)
    description: Optional[str] = None
    options: List[Option] = Field(..., min_length=2)
    category: str = DEFAULT_CATEGORY
    created_at: int
    image_url: Optional[str] = None

    @field_validator("options")
    @classmethod
    def option_ids_unique(cls, v: List[Option]) -> List[Option]:
        ids = [o.id for o in v]
        if len(set(ids)) != len(ids):
            raise ValueError("option ids must be unique within a poll")
        return v

    def find_option(self, option_id: str) -> Optional[Option]:
        for opt in self.options:
            if opt.id == option_id:
                return opt
        return None


class PollDraft(CamelModel):
    """
    Raw user input for a new poll. Nothing is enforced here: blank questions and
    short option lists are rejected by the store, silently.
    """
    question: str = Field("", examples=["Best smartphone of 2025?"])
    options: List[str] = Field(default_factory=list, examples=[["Pixel", "iPhone"]])
    description: Optional[str] = None
    category: Optional[str] = None
    image_url: Optional[str] = None


class RemotePollIn(CamelModel):
    """
    Body of POST {endpoint}/polls: the poll without its id and timestamp.
    """
    question: str
    description: Optional[str] = None
    options: List[Option]
    category: str
    image_url: Optional[str] = None


class VoteIn(CamelModel):
    option_id: str = Field(..., examples=["k3j9x0ab"])


class OptionResult(BaseModel):
    id: str
    text: str
    votes: int
    percentage: int


class PollView(Poll):
    """
    A poll as shown to the current user: carries the option they chose, if any,
    and a relative age like "6h ago".
    """
    voted_for: Optional[str] = None
    age: Optional[str] = None


VoteLedger = Dict[str, str]
