from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from models import Role


class UserCreate(BaseModel):
    first_name: str = Field(..., min_length=1, examples=["Jane"])
    last_name: str = Field(..., min_length=1, examples=["Doe"])
    email: EmailStr = Field(..., examples=["jane.doe@example.com"])
    password: str = Field(..., min_length=1, examples=["secretpassword123"])


class AdminUserCreate(UserCreate):
    role: Role = Field(..., examples=["USER"])


class UserUpdate(BaseModel):
    first_name: str = Field(..., min_length=1, examples=["Jane"])
    last_name: str = Field(..., min_length=1, examples=["Doe"])
    email: EmailStr = Field(..., examples=["jane.doe@example.com"])
    role: Role = Field(..., examples=["USER"])
    password: Optional[str] = Field(None, min_length=1, examples=["newpassword456"])


class UserLogin(BaseModel):
    email: EmailStr = Field(..., examples=["jane.doe@example.com"])
    password: str = Field(..., examples=["secretpassword123"])


class UserOut(BaseModel):
    id: str = Field(..., examples=["5f1c0a7e9b0d4c3aa1e2b3c4d5e6f708"])
    first_name: str = Field(..., examples=["Jane"])
    last_name: str = Field(..., examples=["Doe"])
    email: str = Field(..., examples=["jane.doe@example.com"])
    role: Role = Field(..., examples=["USER"])
    image_url: Optional[str] = Field(None, examples=["https://i.imgur.com/abc123.jpg"])

    model_config = ConfigDict(from_attributes=True)


class Token(BaseModel):
    token: str = Field(..., alias="Token", examples=["eyJhbGciOiJIUzI1NiIsInR5cCI6IkpXVCJ9..."])
    token_type: str = Field("bearer", alias="TokenType", examples=["bearer"])

    model_config = ConfigDict(populate_by_name=True)


class BlogOut(BaseModel):
    id: str = Field(..., examples=["9a8b7c6d5e4f40312233445566778899"])
    title: str = Field(..., examples=["Hiking the Dinaric Alps"])
    description: str = Field(..., examples=["Three days on the Via Dinarica."])
    created_at: datetime = Field(..., examples=["2025-08-20T15:23:01Z"])
    image_url: str = Field(..., examples=["https://i.imgur.com/abc123.jpg"])
    user_id: str = Field(..., examples=["5f1c0a7e9b0d4c3aa1e2b3c4d5e6f708"])
    first_name: str = Field("", examples=["Jane"])
    last_name: str = Field("", examples=["Doe"])

    model_config = ConfigDict(from_attributes=True)


class CommentCreate(BaseModel):
    blog_id: str = Field(..., examples=["9a8b7c6d5e4f40312233445566778899"])
    user_id: str = Field(..., examples=["5f1c0a7e9b0d4c3aa1e2b3c4d5e6f708"])
    content: str = Field(..., min_length=1, examples=["Great write-up!"])


class CommentOut(CommentCreate):
    id: str = Field(..., examples=["0123456789abcdef0123456789abcdef"])
    created_at: datetime = Field(..., examples=["2025-08-21T09:00:00Z"])

    model_config = ConfigDict(from_attributes=True)


class PageMeta(BaseModel):
    page: int = Field(..., alias="Page", examples=[1])
    page_size: int = Field(..., alias="PageSize", examples=[10])
    total_pages: int = Field(..., alias="TotalPages", examples=[3])

    model_config = ConfigDict(populate_by_name=True)


class UserPage(PageMeta):
    total_items: int = Field(..., alias="TotalItems", examples=[25])
    items: list[UserOut] = Field(..., alias="Items")


class BlogPage(PageMeta):
    total_count: int = Field(..., alias="TotalCount", examples=[12])
    blogs: list[BlogOut] = Field(..., alias="Blogs")


class CommentPage(PageMeta):
    total_count: int = Field(..., alias="TotalCount", examples=[4])
    comments: list[CommentOut] = Field(..., alias="Comments")


class HealthOut(BaseModel):
    name: str
    version: str
