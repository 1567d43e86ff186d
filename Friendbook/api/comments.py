from __future__ import annotations

from fastapi import APIRouter

from ..core.models import ReactionKind
from . import schemas
from .dependencies import CurrentUser, Service
from .errors import unwrap

router = APIRouter(prefix="/comments", tags=["Comments"])


@router.post("/{comment_id}/reaction", response_model=schemas.ReactionResponse)
def add_comment_reaction(
    comment_id: int, payload: schemas.ReactionRequest, user: CurrentUser, service: Service
) -> schemas.ReactionResponse:
    comment = unwrap(service.set_comment_reaction(comment_id, user.id, payload.reaction_type))
    return schemas.ReactionResponse(
        message="Reaction added",
        reactions=comment.reactions.as_dict(),
        reaction_count=comment.reactions.total(),
    )


@router.delete("/{comment_id}/reaction/{reaction_type}", response_model=schemas.ReactionResponse)
def remove_comment_reaction(
    comment_id: int, reaction_type: ReactionKind, user: CurrentUser, service: Service
) -> schemas.ReactionResponse:
    comment = unwrap(service.clear_comment_reaction(comment_id, user.id, reaction_type))
    return schemas.ReactionResponse(
        message="Reaction removed",
        reactions=comment.reactions.as_dict(),
        reaction_count=comment.reactions.total(),
    )
