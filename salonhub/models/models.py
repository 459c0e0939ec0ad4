from sqlalchemy import (
    Boolean, CheckConstraint, Column, Date, DateTime, Float, ForeignKey, Index, Integer,
    JSON, String, Text, UniqueConstraint,
)
from sqlalchemy.orm import relationship
from datetime import datetime
from uuid import uuid4
from salonhub.core.database import Base


def generate_id() -> str:
    return str(uuid4())


# ==================== USER / FOLLOW GRAPH MODELS ====================

class User(Base):
    """
    Social profile. Follower/following sets are not stored on the row;
    they are projections of the ``user_follows`` edge table.
    """
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=generate_id)
    phone_number = Column(String(16), unique=True, nullable=True)
    email = Column(String, unique=True, index=True, nullable=True)
    username = Column(String(30), unique=True, index=True, nullable=True)
    name = Column(String(50), nullable=True)
    user_image = Column(String, nullable=True)
    bio = Column(Text, nullable=True)
    address_line1 = Column(String, nullable=True)
    address_line2 = Column(String, nullable=True)
    address_type = Column(String(10), nullable=True)  # Home, Work, Other
    date_of_birth = Column(Date, nullable=True)
    hashed_password = Column(String, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, index=True)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    following_edges = relationship(
        "UserFollow",
        foreign_keys="UserFollow.follower_id",
        back_populates="follower",
        passive_deletes=True,
        order_by="UserFollow.id",
    )
    follower_edges = relationship(
        "UserFollow",
        foreign_keys="UserFollow.following_id",
        back_populates="following",
        passive_deletes=True,
        order_by="UserFollow.id",
    )

    def __repr__(self):
        return f"<User(id={self.id}, username={self.username})>"


class UserFollow(Base):
    """
    One directed edge of the follow graph: ``follower`` follows ``following``.

    A single row backs both ``follower.following`` and ``following.followers``,
    so the two sides can never disagree. The autoincrement id records
    insertion order.
    """
    __tablename__ = "user_follows"
    __table_args__ = (
        UniqueConstraint("follower_id", "following_id", name="uq_user_follows_pair"),
        CheckConstraint("follower_id <> following_id", name="ck_user_follows_no_self"),
        Index("ix_user_follows_following_follower", "following_id", "follower_id"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    follower_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    following_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    created_at = Column(DateTime, default=datetime.utcnow)

    follower = relationship("User", foreign_keys=[follower_id], back_populates="following_edges")
    following = relationship("User", foreign_keys=[following_id], back_populates="follower_edges")

    def __repr__(self):
        return f"<UserFollow(follower={self.follower_id}, following={self.following_id})>"


# ==================== SALON MODELS ====================

class Salon(Base):
    __tablename__ = "salons"
    __table_args__ = (
        Index("ix_salons_active_lat_lng", "is_active", "latitude", "longitude"),
    )

    id = Column(String(36), primary_key=True, default=generate_id)
    name = Column(String, nullable=False)
    images = Column(JSON, nullable=False, default=list)
    location_name = Column(String, nullable=False)
    description = Column(Text, nullable=False)

    # Coordinates in decimal degrees; fixed once the salon is created
    latitude = Column(Float, nullable=False)
    longitude = Column(Float, nullable=False)

    contact_phone = Column(String, nullable=True)
    contact_email = Column(String, nullable=True)
    contact_website = Column(String, nullable=True)
    operating_hours = Column(JSON, nullable=False, default=dict)  # {"monday": {"open": "09:00", "close": "18:00"}}
    amenities = Column(JSON, nullable=False, default=list)

    # Derived on every persist, see salonhub.services.salon_service
    average_price = Column(String, nullable=False, default="₹0")
    rating = Column(Float, nullable=False, default=0.0)
    number_of_reviews = Column(Integer, nullable=False, default=0)

    is_active = Column(Boolean, nullable=False, default=True, index=True)
    created_at = Column(DateTime, default=datetime.utcnow, index=True)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    service_categories = relationship(
        "ServiceCategory",
        back_populates="salon",
        cascade="all, delete-orphan",
        order_by="ServiceCategory.position",
    )
    stylists = relationship(
        "Stylist",
        back_populates="salon",
        cascade="all, delete-orphan",
        order_by="Stylist.position",
    )
    reviews = relationship(
        "SalonReview",
        back_populates="salon",
        cascade="all, delete-orphan",
        order_by="SalonReview.id",
    )

    @property
    def location(self):
        return {"latitude": self.latitude, "longitude": self.longitude}

    @property
    def contact(self):
        return {
            "phone": self.contact_phone,
            "email": self.contact_email,
            "website": self.contact_website,
        }


class ServiceCategory(Base):
    __tablename__ = "service_categories"

    id = Column(Integer, primary_key=True, index=True)
    salon_id = Column(String(36), ForeignKey("salons.id", ondelete="CASCADE"), nullable=False, index=True)
    position = Column(Integer, nullable=False, default=0)
    name = Column(String, nullable=False)
    icon = Column(String, nullable=False, default="cut")  # icon name or URL
    is_active = Column(Boolean, nullable=False, default=True)

    salon = relationship("Salon", back_populates="service_categories")
    services = relationship(
        "SalonService",
        back_populates="category",
        cascade="all, delete-orphan",
        order_by="SalonService.position",
    )


class SalonService(Base):
    """A priced line item inside a service category"""
    __tablename__ = "salon_services"

    id = Column(Integer, primary_key=True, index=True)
    category_id = Column(Integer, ForeignKey("service_categories.id", ondelete="CASCADE"), nullable=False, index=True)
    position = Column(Integer, nullable=False, default=0)
    service_id = Column(String, nullable=False)  # client supplied identifier
    title = Column(String, nullable=False)
    price = Column(String, nullable=False)  # currency formatted, e.g. "₹499"
    duration = Column(Integer, nullable=False, default=30)  # minutes
    description = Column(Text, nullable=True)

    category = relationship("ServiceCategory", back_populates="services")


class Stylist(Base):
    __tablename__ = "stylists"

    id = Column(Integer, primary_key=True, index=True)
    salon_id = Column(String(36), ForeignKey("salons.id", ondelete="CASCADE"), nullable=False, index=True)
    position = Column(Integer, nullable=False, default=0)
    profile_photo = Column(String, nullable=False)
    name = Column(String, nullable=False)
    rating = Column(Float, nullable=False)  # 0 to 5
    specialization = Column(JSON, nullable=False, default=list)
    experience = Column(String, nullable=False, default="")  # e.g. "5 years"
    is_active = Column(Boolean, nullable=False, default=True)

    salon = relationship("Salon", back_populates="stylists")


class SalonReview(Base):
    __tablename__ = "salon_reviews"

    id = Column(Integer, primary_key=True, index=True)
    salon_id = Column(String(36), ForeignKey("salons.id", ondelete="CASCADE"), nullable=False, index=True)
    review_message = Column(Text, nullable=False)
    rating = Column(Float, nullable=False)  # 0 to 5
    customer_name = Column(String, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)

    salon = relationship("Salon", back_populates="reviews")
