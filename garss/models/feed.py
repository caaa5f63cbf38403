from __future__ import annotations

from pydantic import AwareDatetime, BaseModel, ConfigDict, Field


class Channel(BaseModel):
    model_config = ConfigDict(frozen=True)

    url: str = Field(min_length=1, description="Feed endpoint")
    author: str = Field(description="Name attributed to every entry of the feed")
    group: str = Field(default="", description="Group label, empty when ungrouped")


class Entry(BaseModel):
    model_config = ConfigDict(frozen=True)

    title: str = Field(default="", description="Item headline")
    author: str = Field(description="Copied from the owning channel")
    published: AwareDatetime = Field(description="Publication timestamp with offset")
    url: str = Field(min_length=1, description="Link to the original item")
    group: str = Field(default="", description="Copied from the owning channel")
