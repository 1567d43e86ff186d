from __future__ import annotations

from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from ..core.models import Notification, PostType, Privacy, ReactionKind, User
from ..core.threads import CommentNode
from ..core.views import CommentView, PostView, UserSummary, ViewBuilder, public_user_data


class BaseSchema(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


class MessageResponse(BaseSchema):
    message: str


# ---------------------------------------------------------------------------
# Users


class UserSummaryOut(BaseSchema):
    id: int
    username: str
    full_name: str
    profile_picture: Optional[str] = None
    location: Optional[str] = None

    @classmethod
    def from_summary(cls, summary: Optional[UserSummary]) -> Optional["UserSummaryOut"]:
        return cls.model_validate(summary) if summary is not None else None

    @classmethod
    def from_user(cls, user: User) -> "UserSummaryOut":
        return cls.model_validate(UserSummary.from_user(user))


class EducationSchema(BaseSchema):
    school: str = Field(..., max_length=255)
    degree: str = Field(..., max_length=255)
    year: str = Field(..., max_length=32)


class WorkSchema(BaseSchema):
    company: str = Field(..., max_length=255)
    position: str = Field(..., max_length=255)
    year: str = Field(..., max_length=32)


class PublicUserOut(BaseSchema):
    id: int
    username: str
    full_name: str
    profile_picture: Optional[str] = None
    cover_photo: Optional[str] = None
    bio: str = ""
    location: Optional[str] = None
    education: List[EducationSchema] = Field(default_factory=list)
    work: List[WorkSchema] = Field(default_factory=list)
    friends: List[int] = Field(default_factory=list)
    created_at: datetime

    @classmethod
    def from_user(cls, user: User) -> "PublicUserOut":
        return cls.model_validate(public_user_data(user))


class ProfileOut(PublicUserOut):
    friends: List[PublicUserOut] = Field(default_factory=list)

    @classmethod
    def from_profile(cls, user: User, friends: List[User]) -> "ProfileOut":
        data = public_user_data(user)
        data["friends"] = [PublicUserOut.from_user(friend) for friend in friends]
        return cls.model_validate(data)


class ProfileUpdateRequest(BaseSchema):
    full_name: Optional[str] = Field(None, max_length=128)
    bio: Optional[str] = Field(None, max_length=1000)
    location: Optional[str] = Field(None, max_length=255)
    profile_picture: Optional[str] = Field(None, max_length=512)
    cover_photo: Optional[str] = Field(None, max_length=512)
    education: Optional[List[EducationSchema]] = None
    work: Optional[List[WorkSchema]] = None


class SuggestedFriendOut(UserSummaryOut):
    mutual_friends: int


class NotificationOut(BaseSchema):
    id: int
    type: str
    from_user_id: int
    from_user: Optional[UserSummaryOut] = None
    entity_id: Optional[int] = None
    read: bool
    created_at: datetime

    @classmethod
    def from_model(cls, notification: Notification, views: ViewBuilder) -> "NotificationOut":
        return cls(
            id=notification.id,
            type=notification.type.value,
            from_user_id=notification.from_user_id,
            from_user=UserSummaryOut.from_summary(views.summary(notification.from_user_id, with_location=False)),
            entity_id=notification.entity_id,
            read=notification.read,
            created_at=notification.created_at,
        )


class MarkAllReadResponse(MessageResponse):
    updated: int


# ---------------------------------------------------------------------------
# Auth


class RegisterRequest(BaseSchema):
    username: str = Field(..., min_length=3, max_length=32)
    password: str = Field(..., min_length=6, max_length=128)
    full_name: Optional[str] = Field(None, max_length=128)


class LoginRequest(BaseSchema):
    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class AuthResponse(BaseSchema):
    message: str
    token: str
    user: UserSummaryOut


# ---------------------------------------------------------------------------
# Posts


class LinkDataSchema(BaseSchema):
    url: str = Field(..., min_length=1, max_length=2048)
    title: Optional[str] = Field(None, max_length=255)
    description: Optional[str] = Field(None, max_length=1000)
    image: Optional[str] = Field(None, max_length=2048)


class CreatePostRequest(BaseSchema):
    content: str = Field(..., min_length=1, max_length=5000)
    post_type: PostType = PostType.TEXT
    image_url: Optional[str] = Field(None, max_length=2048)
    video_url: Optional[str] = Field(None, max_length=2048)
    link_data: Optional[LinkDataSchema] = None
    privacy: Privacy = Privacy.PUBLIC
    location: Optional[str] = Field(None, max_length=255)
    tagged_users: List[int] = Field(default_factory=list)

    @field_validator("content")
    @classmethod
    def content_not_blank(cls, content: str) -> str:
        if not content.strip():
            raise ValueError("Post content is required")
        return content


class SharePostRequest(BaseSchema):
    content: str = Field("", max_length=5000)


class ReactionRequest(BaseSchema):
    reaction_type: ReactionKind


class ReactionResponse(MessageResponse):
    reactions: Dict[str, List[int]]
    reaction_count: int


class PostOut(BaseSchema):
    id: int
    user_id: int
    content: str
    post_type: PostType
    image_url: Optional[str] = None
    video_url: Optional[str] = None
    link_url: Optional[str] = None
    link_title: Optional[str] = None
    link_description: Optional[str] = None
    link_image: Optional[str] = None
    privacy: Privacy
    location: Optional[str] = None
    tagged_users: List[int] = Field(default_factory=list)
    reactions: Dict[str, List[int]]
    share_count: int
    original_post_id: Optional[int] = None
    created_at: datetime
    updated_at: datetime
    user: Optional[UserSummaryOut] = None
    tagged_users_info: List[UserSummaryOut] = Field(default_factory=list)
    original_post: Optional["PostOut"] = None
    comment_count: int = 0
    reaction_count: int = 0

    @classmethod
    def from_view(cls, view: PostView) -> "PostOut":
        post = view.post
        link = post.link
        return cls(
            id=post.id,
            user_id=post.user_id,
            content=post.content,
            post_type=post.post_type,
            image_url=post.image_url,
            video_url=post.video_url,
            link_url=link.url if link else None,
            link_title=link.title if link else None,
            link_description=link.description if link else None,
            link_image=link.image if link else None,
            privacy=post.privacy,
            location=post.location,
            tagged_users=list(post.tagged_users),
            reactions=post.reactions.as_dict(),
            share_count=post.share_count,
            original_post_id=post.original_post_id,
            created_at=post.created_at,
            updated_at=post.updated_at,
            user=UserSummaryOut.from_summary(view.author),
            tagged_users_info=[UserSummaryOut.model_validate(tagged) for tagged in view.tagged],
            original_post=cls.from_view(view.original) if view.original else None,
            comment_count=view.comment_count,
            reaction_count=view.reaction_count,
        )


# ---------------------------------------------------------------------------
# Comments


class CreateCommentRequest(BaseSchema):
    content: str = Field(..., min_length=1, max_length=2000)
    parent_id: Optional[int] = None
    tagged_users: List[int] = Field(default_factory=list)

    @field_validator("content")
    @classmethod
    def content_not_blank(cls, content: str) -> str:
        if not content.strip():
            raise ValueError("Comment content is required")
        return content


class CommentOut(BaseSchema):
    id: int
    post_id: int
    user_id: int
    content: str
    parent_id: Optional[int] = None
    tagged_users: List[int] = Field(default_factory=list)
    reactions: Dict[str, List[int]]
    created_at: datetime
    updated_at: datetime
    user: Optional[UserSummaryOut] = None

    @classmethod
    def from_view(cls, view: CommentView) -> "CommentOut":
        comment = view.comment
        return cls(
            id=comment.id,
            post_id=comment.post_id,
            user_id=comment.user_id,
            content=comment.content,
            parent_id=comment.parent_id,
            tagged_users=list(comment.tagged_users),
            reactions=comment.reactions.as_dict(),
            created_at=comment.created_at,
            updated_at=comment.updated_at,
            user=UserSummaryOut.from_summary(view.author),
        )


class CommentThreadOut(CommentOut):
    replies: List["CommentThreadOut"] = Field(default_factory=list)

    @classmethod
    def from_node(cls, node: CommentNode, views: ViewBuilder) -> "CommentThreadOut":
        base = CommentOut.from_view(views.comment_view(node.comment))
        return cls(
            **base.model_dump(),
            replies=[cls.from_node(reply, views) for reply in node.replies],
        )


PostOut.model_rebuild()
CommentThreadOut.model_rebuild()
