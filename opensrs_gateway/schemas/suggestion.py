"""Name suggestion schemas"""
from typing import List, Literal, Optional
from pydantic import BaseModel, Field


class SuggestionRequest(BaseModel):
    """Schema for name suggestions"""
    search_string: str = Field(..., min_length=1, max_length=255, alias="searchString")
    tlds: Optional[List[str]] = None
    services: Optional[List[Literal["lookup", "suggestion", "premium", "personal_names"]]] = None
    languages: Optional[List[str]] = None
    max_wait_time: int = Field(default=30, ge=1, le=60)
    search_key: Optional[str] = None

    class Config:
        populate_by_name = True
