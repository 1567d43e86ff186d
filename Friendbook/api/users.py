from __future__ import annotations

from typing import List

from fastapi import APIRouter, HTTPException, Query, status

from ..core.models import Education, WorkEntry
from ..core.service import ProfileUpdate
from . import schemas
from .dependencies import CurrentUser, Service
from .errors import unwrap

router = APIRouter(prefix="/users", tags=["Users"])


@router.get("/me", response_model=schemas.PublicUserOut)
def get_me(user: CurrentUser) -> schemas.PublicUserOut:
    return schemas.PublicUserOut.from_user(user)


@router.get("/search", response_model=List[schemas.UserSummaryOut])
def search_users(
    user: CurrentUser,
    service: Service,
    q: str = Query(..., min_length=1, max_length=64),
    limit: int = Query(default=20, ge=1, le=100),
) -> List[schemas.UserSummaryOut]:
    matches = unwrap(service.search_users(q, limit))
    return [schemas.UserSummaryOut.from_user(match) for match in matches]


@router.get("/friend-requests", response_model=List[schemas.PublicUserOut])
def get_friend_requests(user: CurrentUser, service: Service) -> List[schemas.PublicUserOut]:
    requesters = unwrap(service.friends.pending_requests(user.id))
    return [schemas.PublicUserOut.from_user(requester) for requester in requesters]


@router.get("/suggested-friends", response_model=List[schemas.SuggestedFriendOut])
def get_suggested_friends(
    user: CurrentUser,
    service: Service,
    limit: int = Query(default=10, ge=1, le=100),
) -> List[schemas.SuggestedFriendOut]:
    ranked = unwrap(service.suggested_friends(user.id, limit))
    return [
        schemas.SuggestedFriendOut(
            **schemas.UserSummaryOut.from_user(candidate).model_dump(),
            mutual_friends=mutuals,
        )
        for candidate, mutuals in ranked
    ]


@router.get("/notifications", response_model=List[schemas.NotificationOut])
def get_notifications(
    user: CurrentUser,
    service: Service,
    unread_only: bool = Query(default=False, alias="unreadOnly"),
) -> List[schemas.NotificationOut]:
    notifications = unwrap(service.list_notifications(user.id, unread_only))
    return [schemas.NotificationOut.from_model(item, service.views) for item in notifications]


@router.post("/notifications/read-all", response_model=schemas.MarkAllReadResponse)
def mark_all_notifications_read(user: CurrentUser, service: Service) -> schemas.MarkAllReadResponse:
    updated = unwrap(service.mark_all_notifications_read(user.id))
    return schemas.MarkAllReadResponse(message="All notifications marked as read", updated=updated)


@router.post("/notifications/{notification_id}/read", response_model=schemas.NotificationOut)
def mark_notification_read(notification_id: int, user: CurrentUser, service: Service) -> schemas.NotificationOut:
    notification = unwrap(service.mark_notification_read(user.id, notification_id))
    return schemas.NotificationOut.from_model(notification, service.views)


@router.get("/{user_id}", response_model=schemas.PublicUserOut)
def get_user(user_id: int, user: CurrentUser, service: Service) -> schemas.PublicUserOut:
    return schemas.PublicUserOut.from_user(unwrap(service.get_user(user_id)))


@router.get("/{user_id}/profile", response_model=schemas.ProfileOut)
def get_profile(user_id: int, user: CurrentUser, service: Service) -> schemas.ProfileOut:
    profile, friends = unwrap(service.get_profile(user_id))
    return schemas.ProfileOut.from_profile(profile, friends)


@router.put("/{user_id}/profile", response_model=schemas.PublicUserOut)
def update_profile(
    user_id: int,
    payload: schemas.ProfileUpdateRequest,
    user: CurrentUser,
    service: Service,
) -> schemas.PublicUserOut:
    if user_id != user.id:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="You can only edit your own profile")
    changes = ProfileUpdate(
        full_name=payload.full_name,
        bio=payload.bio,
        location=payload.location,
        profile_picture=payload.profile_picture,
        cover_photo=payload.cover_photo,
        education=[Education(**item.model_dump()) for item in payload.education]
        if payload.education is not None
        else None,
        work=[WorkEntry(**item.model_dump()) for item in payload.work] if payload.work is not None else None,
    )
    return schemas.PublicUserOut.from_user(unwrap(service.update_profile(user_id, changes)))


@router.get("/{user_id}/friends", response_model=List[schemas.PublicUserOut])
def get_friends(user_id: int, user: CurrentUser, service: Service) -> List[schemas.PublicUserOut]:
    friends = unwrap(service.friends.friends_of(user_id))
    return [schemas.PublicUserOut.from_user(friend) for friend in friends]


@router.post("/{user_id}/friend-request", response_model=schemas.MessageResponse)
def send_friend_request(user_id: int, user: CurrentUser, service: Service) -> schemas.MessageResponse:
    unwrap(service.send_friend_request(user.id, user_id))
    return schemas.MessageResponse(message="Friend request sent successfully")


@router.post("/{user_id}/accept-friend", response_model=schemas.MessageResponse)
def accept_friend_request(user_id: int, user: CurrentUser, service: Service) -> schemas.MessageResponse:
    unwrap(service.accept_friend_request(user.id, user_id))
    return schemas.MessageResponse(message="Friend request accepted successfully")


@router.post("/{user_id}/reject-friend", response_model=schemas.MessageResponse)
def reject_friend_request(user_id: int, user: CurrentUser, service: Service) -> schemas.MessageResponse:
    unwrap(service.reject_friend_request(user.id, user_id))
    return schemas.MessageResponse(message="Friend request rejected")


@router.post("/{user_id}/remove-friend", response_model=schemas.MessageResponse)
def remove_friend(user_id: int, user: CurrentUser, service: Service) -> schemas.MessageResponse:
    unwrap(service.remove_friend(user.id, user_id))
    return schemas.MessageResponse(message="Friend removed")
