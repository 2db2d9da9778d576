from datetime import datetime

from pydantic import BaseModel, model_validator


# --- Issuer ---

class IssuerPublic(BaseModel):
    issuer: str = ""
    issuer_website: str = ""


class Issuer(IssuerPublic):
    # Accepted and persisted, never returned by a read.
    issuer_email: str = ""


# --- Requests ---

class RequestBody(BaseModel):
    @model_validator(mode="before")
    @classmethod
    def null_as_empty(cls, data):
        # JSON null reads as "", the same as an absent field.
        if isinstance(data, dict):
            return {name: "" if value is None else value for name, value in data.items()}
        return data


class CommentCreate(Issuer, RequestBody):
    # Required fields default to "": absent, null and empty all fail in the service.
    domain: str = ""
    path: str = ""
    content: str = ""


class ReplyCreate(Issuer, RequestBody):
    cid: str = ""
    rid: str = ""
    content: str = ""


# --- Stored records ---

class CommentRecord(Issuer):
    id: str
    domain: str
    path: str
    content: str
    ctime: datetime


class ReplyRecord(Issuer):
    id: str
    cid: str
    rid: str = ""
    content: str
    ctime: datetime


# --- Read responses (issuer email redacted) ---

class ReplyResponse(IssuerPublic):
    id: str
    cid: str
    rid: str = ""
    content: str
    ctime: datetime


class CommentResponse(IssuerPublic):
    id: str
    domain: str
    path: str
    content: str
    ctime: datetime
    replies: list[ReplyResponse] = []


class CommentResults(BaseModel):
    done: bool = True
    comments: list[CommentResponse] = []


# --- Metrics ---

class MetricsResponse(BaseModel):
    total_comments: int
    total_replies: int
    avg_replies_per_comment: float
