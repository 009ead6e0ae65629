"""
Response shapes produced by the completion service for each task variant.

Models allow extra keys; they only check that the fields the client relies on
are present with the right container types.
"""
from pydantic import BaseModel, ConfigDict
from typing import List, Union


class ArtifactBase(BaseModel):
    model_config = ConfigDict(extra="allow")


class AtsMatchReport(ArtifactBase):
    job_position: str
    ats_score: Union[str, int, float]
    matched_keywords: List[str]
    missing_keywords: List[str]
    suggestions: List[str]
    recommendations: List[str]


class PortfolioBundle(ArtifactBase):
    html: str
    css: str
    javascript: str


class PortfolioPage(ArtifactBase):
    html: str
