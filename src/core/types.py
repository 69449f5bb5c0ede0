"""Shared type aliases used across the content models."""
from __future__ import annotations

from typing import Annotated, Literal

from pydantic import Field, StringConstraints

Percent = Annotated[int, Field(ge=0, le=100)]
NonNegInt = Annotated[int, Field(ge=0)]
NonNegFloat = Annotated[float, Field(ge=0)]
Level = Literal["low", "moderate", "high"]
SustainabilityRating = Literal["A", "B", "C", "D"]
LanguageCode = Literal["en", "fr", "ar"]
MonthAbbr = Literal["Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec"]
NonBlankStr = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]
