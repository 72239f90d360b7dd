from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class PostRequest(BaseModel):
    model_config = ConfigDict(extra="ignore")

    text: str | None = Field(default=None, description="Post text, 10 to 300 characters")


class CommentRequest(PostRequest):
    pass


class LikeEntry(BaseModel):
    user: str


class CommentEntry(BaseModel):
    id: str
    text: str
    name: str | None = None
    avatar: str | None = None
    user: str
    date: datetime | None = None


class PostResponse(BaseModel):
    id: str
    user: str
    text: str
    name: str | None = None
    avatar: str | None = None
    likes: list[LikeEntry] = Field(default_factory=list)
    comments: list[CommentEntry] = Field(default_factory=list)
    date: datetime


class DeleteResponse(BaseModel):
    success: bool
