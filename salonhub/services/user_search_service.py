"""
User discovery by name / username, ranked by the caller's follow relationships.
"""
from typing import List
from sqlalchemy import or_, select
from sqlalchemy.orm import Session, aliased
from salonhub.models.models import User, UserFollow


def name_or_username_contains(search_text: str):
    """Case-insensitive substring match on name or username; wildcards are literal"""
    return or_(
        User.name.icontains(search_text, autoescape=True),
        User.username.icontains(search_text, autoescape=True),
    )


def search_users(
    db: Session,
    caller_id: str,
    search_text: str = None,
    limit: int = 10,
) -> List[User]:
    """
    Return users other than the caller whose name or username contains
    ``search_text`` (all users when it is empty).

    Users the caller already follows come first; within each group the most
    recently created accounts lead.
    """
    probe = aliased(UserFollow)
    is_following = (
        select(probe.id)
        .where(probe.follower_id == caller_id, probe.following_id == User.id)
        .exists()
        .label("is_following")
    )

    query = db.query(User, is_following).filter(User.id != caller_id)
    if search_text:
        query = query.filter(name_or_username_contains(search_text))

    rows = (
        query.order_by(is_following.desc(), User.created_at.desc(), User.id.desc())
        .limit(limit)
        .all()
    )
    return [user for user, _ in rows]
