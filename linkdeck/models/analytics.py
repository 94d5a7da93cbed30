"""Analytics response models."""

from typing import List

from sqlmodel import Field, SQLModel


class AnalyticsItem(SQLModel):
    """One bucket of a grouping: a value and how many views carried it."""

    name: str
    count: int


class ShortcutAnalyticsRead(SQLModel):
    """View counts of a shortcut grouped by referer, OS family and browser."""

    references: List[AnalyticsItem] = Field(default_factory=list)
    devices: List[AnalyticsItem] = Field(default_factory=list)
    browsers: List[AnalyticsItem] = Field(default_factory=list)
