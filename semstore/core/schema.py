"""
Request validation models for the embedding store facade.
"""

from typing import Optional

from pydantic import BaseModel, Field, StrictStr, field_validator


class StoreRequest(BaseModel):
    content: StrictStr

    @field_validator('content')
    @classmethod
    def content_must_not_be_empty(cls, v):
        if not v.strip():
            raise ValueError('content cannot be empty')
        try:
            v.encode('utf-8')
        except UnicodeEncodeError as e:
            raise ValueError(f'content is not valid UTF-8 text: {e.reason}') from e
        return v


class SearchRequest(BaseModel):
    k: int = Field(default=10, ge=0)
    min_similarity: Optional[float] = Field(default=None, ge=0.0, le=1.0)

    @property
    def max_distance(self) -> Optional[float]:
        """Distance cutoff implied by the minimum similarity."""
        if self.min_similarity is None:
            return None
        return 1.0 - self.min_similarity
