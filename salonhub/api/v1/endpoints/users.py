import logging
from typing import List, Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from salonhub.core.config import settings
from salonhub.core.database import commit_or_raise, get_db
from salonhub.core.exceptions import BadRequestError, NotFoundError
from salonhub.core.security import get_current_user
from salonhub.models.models import User
from salonhub.schemas.schemas import (
    FollowListItem,
    FollowToggleResponse,
    ProfileResponse,
    ProfileUpdate,
    PublicProfileResponse,
    UserResponse,
    UserSearchResponse,
)
from salonhub.services import follow_service
from salonhub.services.user_search_service import search_users
from salonhub.utils.pagination import parse_page

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/profile", response_model=ProfileResponse)
def get_profile(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Get the caller's own profile with follow counts"""
    profile = UserResponse.model_validate(current_user).model_dump()
    return ProfileResponse(
        **profile,
        followers_count=follow_service.count_followers(db, current_user.id),
        following_count=follow_service.count_following(db, current_user.id),
    )


@router.patch("/profile", response_model=UserResponse)
def update_profile(
    profile_update: ProfileUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Update the caller's profile fields"""
    update_data = profile_update.model_dump(exclude_unset=True)
    if not any(value is not None for value in update_data.values()):
        raise BadRequestError("No update fields provided")

    new_email = update_data.get("email")
    if new_email and new_email != current_user.email:
        existing = db.query(User).filter(User.email == new_email, User.id != current_user.id).first()
        if existing:
            raise BadRequestError("Email already exists")

    for field, value in update_data.items():
        setattr(current_user, field, value)

    commit_or_raise(db, "update profile")
    db.refresh(current_user)
    logger.info(f"User {current_user.id} updated {', '.join(sorted(update_data))}")
    return current_user


@router.get("/search", response_model=UserSearchResponse)
def search(
    text: Optional[str] = Query(None, description="Substring of name or username"),
    limit: Optional[str] = Query(None),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Find other users, people the caller follows first"""
    page_size, _ = parse_page(limit, None, settings.DEFAULT_PAGE_SIZE, settings.MAX_PAGE_SIZE)
    users = search_users(db, current_user.id, text, page_size)
    return {"users": users}


@router.get("/handle/{username}", response_model=PublicProfileResponse)
def view_user_by_handle(
    username: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Public profile of another user looked up by username"""
    user = db.query(User).filter(User.username == username).first()
    if not user:
        raise NotFoundError("User not found")

    return PublicProfileResponse(
        id=user.id,
        name=user.name,
        username=user.username,
        user_image=user.user_image,
        bio=user.bio,
        followers_count=follow_service.count_followers(db, user.id),
        following_count=follow_service.count_following(db, user.id),
        is_following=follow_service.is_following(db, current_user.id, user.id),
    )


@router.post("/follow/{user_id}", response_model=FollowToggleResponse)
def toggle_following(
    user_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Follow the user, or unfollow if already following"""
    state = follow_service.toggle_follow(db, current_user.id, user_id)
    return {"state": state, "message": state.capitalize()}


@router.get("/{user_id}/followers", response_model=List[FollowListItem])
def get_followers(
    user_id: str,
    search_text: Optional[str] = Query(None, alias="searchText"),
    limit: Optional[str] = Query(None),
    offset: Optional[str] = Query(None),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Followers of a user; those who follow the caller come first"""
    page_size, skip = parse_page(limit, offset, settings.DEFAULT_PAGE_SIZE, settings.MAX_PAGE_SIZE)
    return follow_service.list_followers(db, user_id, current_user.id, search_text, page_size, skip)


@router.get("/{user_id}/following", response_model=List[FollowListItem])
def get_following(
    user_id: str,
    search_text: Optional[str] = Query(None, alias="searchText"),
    limit: Optional[str] = Query(None),
    offset: Optional[str] = Query(None),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Users a user follows; those the caller follows come first"""
    page_size, skip = parse_page(limit, offset, settings.DEFAULT_PAGE_SIZE, settings.MAX_PAGE_SIZE)
    return follow_service.list_following(db, user_id, current_user.id, search_text, page_size, skip)
