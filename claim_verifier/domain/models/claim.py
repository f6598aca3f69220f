"""Domain model for classified claims."""

from typing import List

from pydantic import BaseModel, Field


class ClaimProfile(BaseModel):
    """Rule-based classification of a claim, computed once per request."""

    raw_text: str = Field(default="", description="The claim text as submitted")
    is_temporal: bool = Field(default=False, description="Refers to a point or span in time")
    is_factual: bool = Field(default=False, description="States something that is or is not the case")
    is_predictive: bool = Field(default=False, description="Makes a statement about the future")
    is_biographical: bool = Field(default=False, description="Describes a person's life or career")
    is_historical: bool = Field(default=False, description="Refers to a historical era or event")
    categories: List[str] = Field(default_factory=list, description="Topic categories")

    class Config:
        """Pydantic model configuration."""
        frozen = True
        json_schema_extra = {
            "example": {
                "raw_text": "Tom Hanks is an American actor born on July 9, 1956.",
                "is_temporal": False,
                "is_factual": True,
                "is_predictive": False,
                "is_biographical": True,
                "is_historical": False,
                "categories": ["entertainment", "film", "biography", "person"],
            }
        }
