"""
Follow graph operations.

Every relationship is one ``UserFollow`` row, so a user's ``following`` set
and the matching ``followers`` set of the other user are two views of the
same data. Toggling writes or deletes that single row inside one
transaction; there is no second write that could fail on its own.
"""
import logging
from typing import List
from sqlalchemy import and_, func, select
from sqlalchemy.orm import Session, aliased
from salonhub.core.database import commit_or_raise
from salonhub.core.exceptions import BadRequestError, NotFoundError
from salonhub.models.models import User, UserFollow
from salonhub.services.user_search_service import name_or_username_contains

logger = logging.getLogger(__name__)

FOLLOWED = "followed"
UNFOLLOWED = "unfollowed"

FOLLOWERS = "followers"
FOLLOWING = "following"


def get_user_or_404(db: Session, user_id: str) -> User:
    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise NotFoundError("User not found")
    return user


def is_following(db: Session, actor_id: str, target_id: str) -> bool:
    """True when ``actor_id`` follows ``target_id``"""
    edge = db.query(UserFollow.id).filter(
        UserFollow.follower_id == actor_id,
        UserFollow.following_id == target_id
    ).first()
    return edge is not None


def count_followers(db: Session, user_id: str) -> int:
    return db.query(func.count(UserFollow.id)).filter(UserFollow.following_id == user_id).scalar()


def count_following(db: Session, user_id: str) -> int:
    return db.query(func.count(UserFollow.id)).filter(UserFollow.follower_id == user_id).scalar()


def follower_ids(db: Session, user_id: str) -> List[str]:
    """Ids of users following ``user_id``, oldest relationship first"""
    rows = db.query(UserFollow.follower_id).filter(
        UserFollow.following_id == user_id
    ).order_by(UserFollow.id).all()
    return [row.follower_id for row in rows]


def following_ids(db: Session, user_id: str) -> List[str]:
    """Ids of users ``user_id`` follows, oldest relationship first"""
    rows = db.query(UserFollow.following_id).filter(
        UserFollow.follower_id == user_id
    ).order_by(UserFollow.id).all()
    return [row.following_id for row in rows]


def toggle_follow(db: Session, actor_id: str, target_id: str) -> str:
    """
    Follow ``target_id`` if the actor does not follow them yet, otherwise
    unfollow. Returns ``"followed"`` or ``"unfollowed"``.
    """
    if not target_id:
        raise BadRequestError("Missing target user ID")
    if actor_id == target_id:
        raise BadRequestError("You cannot follow yourself")

    get_user_or_404(db, target_id)
    get_user_or_404(db, actor_id)

    edge = db.query(UserFollow).filter(
        UserFollow.follower_id == actor_id,
        UserFollow.following_id == target_id
    ).first()

    if edge:
        db.delete(edge)
        state = UNFOLLOWED
    else:
        db.add(UserFollow(follower_id=actor_id, following_id=target_id))
        state = FOLLOWED

    commit_or_raise(db, "update follow relationship")
    logger.info(f"User {actor_id} {state} user {target_id}")
    return state


def _list_connections(
    db: Session,
    direction: str,
    user_id: str,
    viewer_id: str,
    search_text: str,
    limit: int,
    offset: int,
) -> List[dict]:
    get_user_or_404(db, user_id)

    edge = aliased(UserFollow)
    probe = aliased(UserFollow)

    if direction == FOLLOWERS:
        # people who follow user_id; flag those who follow the viewer
        join_on = edge.follower_id == User.id
        belongs = edge.following_id == user_id
        viewer_edge = and_(probe.follower_id == User.id, probe.following_id == viewer_id)
    else:
        # people user_id follows; flag those the viewer follows
        join_on = edge.following_id == User.id
        belongs = edge.follower_id == user_id
        viewer_edge = and_(probe.follower_id == viewer_id, probe.following_id == User.id)

    is_following_flag = select(probe.id).where(viewer_edge).exists().label("is_following")

    query = db.query(User, is_following_flag).join(edge, join_on).filter(belongs)
    if search_text:
        query = query.filter(name_or_username_contains(search_text))

    rows = (
        query.order_by(is_following_flag.desc(), edge.id.asc())
        .offset(offset)
        .limit(limit)
        .all()
    )

    return [
        {
            "id": user.id,
            "name": user.name,
            "username": user.username,
            "user_image": user.user_image,
            "is_following": bool(flag),
        }
        for user, flag in rows
    ]


def list_followers(db: Session, user_id: str, viewer_id: str, search_text: str = None,
                   limit: int = 10, offset: int = 0) -> List[dict]:
    """Followers of ``user_id``; ``is_following`` means that follower follows the viewer"""
    return _list_connections(db, FOLLOWERS, user_id, viewer_id, search_text, limit, offset)


def list_following(db: Session, user_id: str, viewer_id: str, search_text: str = None,
                   limit: int = 10, offset: int = 0) -> List[dict]:
    """Users ``user_id`` follows; ``is_following`` means the viewer follows them"""
    return _list_connections(db, FOLLOWING, user_id, viewer_id, search_text, limit, offset)
