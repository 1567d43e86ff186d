from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Query, status

from ..core.models import LinkPreview, ReactionKind
from . import schemas
from .dependencies import CurrentUser, Service
from .errors import unwrap

router = APIRouter(prefix="/posts", tags=["Posts"])


@router.get("/feed", response_model=List[schemas.PostOut])
def get_feed(user: CurrentUser, service: Service) -> List[schemas.PostOut]:
    return [schemas.PostOut.from_view(view) for view in unwrap(service.get_feed(user.id))]


@router.get("/trending", response_model=List[schemas.PostOut])
def get_trending(
    user: CurrentUser,
    service: Service,
    limit: Optional[int] = Query(default=None, ge=1, le=100),
) -> List[schemas.PostOut]:
    return [schemas.PostOut.from_view(view) for view in unwrap(service.get_trending(limit, user.id))]


@router.get("/suggested", response_model=List[schemas.PostOut])
def get_suggested(
    user: CurrentUser,
    service: Service,
    limit: Optional[int] = Query(default=None, ge=1, le=100),
) -> List[schemas.PostOut]:
    return [schemas.PostOut.from_view(view) for view in unwrap(service.get_suggested(user.id, limit))]


@router.post("", response_model=schemas.PostOut, status_code=status.HTTP_201_CREATED)
def create_post(payload: schemas.CreatePostRequest, user: CurrentUser, service: Service) -> schemas.PostOut:
    link = None
    if payload.link_data is not None:
        link = LinkPreview(**payload.link_data.model_dump())
    post = unwrap(
        service.create_post(
            user.id,
            payload.content,
            payload.post_type,
            image_url=payload.image_url,
            video_url=payload.video_url,
            link=link,
            privacy=payload.privacy,
            location=payload.location,
            tagged_users=payload.tagged_users,
        )
    )
    return schemas.PostOut.from_view(service.views.post_view(post, user.id))


@router.get("/user/{user_id}", response_model=List[schemas.PostOut])
def get_user_posts(user_id: int, user: CurrentUser, service: Service) -> List[schemas.PostOut]:
    return [schemas.PostOut.from_view(view) for view in unwrap(service.user_posts(user_id, user.id))]


@router.get("/{post_id}", response_model=schemas.PostOut)
def get_post(post_id: int, user: CurrentUser, service: Service) -> schemas.PostOut:
    return schemas.PostOut.from_view(unwrap(service.get_post(post_id, viewer_id=user.id)))


def _reaction_response(message: str, target) -> schemas.ReactionResponse:
    return schemas.ReactionResponse(
        message=message,
        reactions=target.reactions.as_dict(),
        reaction_count=target.reactions.total(),
    )


@router.post("/{post_id}/like", response_model=schemas.ReactionResponse)
def like_post(post_id: int, user: CurrentUser, service: Service) -> schemas.ReactionResponse:
    return _reaction_response("Post liked successfully", unwrap(service.like_post(post_id, user.id)))


@router.post("/{post_id}/unlike", response_model=schemas.ReactionResponse)
def unlike_post(post_id: int, user: CurrentUser, service: Service) -> schemas.ReactionResponse:
    return _reaction_response("Post unliked successfully", unwrap(service.unlike_post(post_id, user.id)))


@router.post("/{post_id}/reaction", response_model=schemas.ReactionResponse)
def add_reaction(
    post_id: int, payload: schemas.ReactionRequest, user: CurrentUser, service: Service
) -> schemas.ReactionResponse:
    post = unwrap(service.set_post_reaction(post_id, user.id, payload.reaction_type))
    return _reaction_response("Reaction added", post)


@router.delete("/{post_id}/reaction/{reaction_type}", response_model=schemas.ReactionResponse)
def remove_reaction(
    post_id: int, reaction_type: ReactionKind, user: CurrentUser, service: Service
) -> schemas.ReactionResponse:
    post = unwrap(service.clear_post_reaction(post_id, user.id, reaction_type))
    return _reaction_response("Reaction removed", post)


@router.post("/{post_id}/share", response_model=schemas.PostOut, status_code=status.HTTP_201_CREATED)
def share_post(
    post_id: int, payload: schemas.SharePostRequest, user: CurrentUser, service: Service
) -> schemas.PostOut:
    shared = unwrap(service.share_post(post_id, user.id, payload.content))
    return schemas.PostOut.from_view(service.views.post_view(shared, user.id))


@router.get(
    "/{post_id}/comments",
    response_model=List[schemas.CommentThreadOut],
)
def get_comments(
    post_id: int,
    user: CurrentUser,
    service: Service,
    threaded: bool = Query(default=False),
) -> List[schemas.CommentThreadOut]:
    if threaded:
        roots = unwrap(service.comment_tree(post_id))
        return [schemas.CommentThreadOut.from_node(node, service.views) for node in roots]
    # Flat listing, oldest first; every entry carries an empty replies list.
    return [
        schemas.CommentThreadOut(**schemas.CommentOut.from_view(view).model_dump())
        for view in unwrap(service.get_comments(post_id))
    ]


@router.post("/{post_id}/comments", response_model=schemas.CommentOut, status_code=status.HTTP_201_CREATED)
def add_comment(
    post_id: int, payload: schemas.CreateCommentRequest, user: CurrentUser, service: Service
) -> schemas.CommentOut:
    comment = unwrap(
        service.add_comment(
            post_id,
            user.id,
            payload.content,
            parent_id=payload.parent_id,
            tagged_users=payload.tagged_users,
        )
    )
    return schemas.CommentOut.from_view(service.views.comment_view(comment))
