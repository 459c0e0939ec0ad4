from __future__ import annotations
from pydantic import BaseModel, EmailStr, Field
from datetime import date, datetime
from typing import Dict, List, Literal, Optional


# Auth schemas
class UserRegister(BaseModel):
    """Email sign-up"""
    email: EmailStr
    password: str = Field(..., min_length=6)
    username: str = Field(..., pattern=r"^[A-Za-z0-9_.]{3,30}$")
    name: Optional[str] = Field(None, max_length=50)
    phone_number: Optional[str] = Field(None, pattern=r"^\+?[1-9]\d{7,14}$")


class UserLogin(BaseModel):
    email: EmailStr
    password: str


class RefreshTokenRequest(BaseModel):
    refresh_token: str


class UsernameCheck(BaseModel):
    username: str = Field(..., min_length=1)


class UsernameAvailability(BaseModel):
    username: str
    available: bool


# User schemas
class UserResponse(BaseModel):
    id: str
    name: Optional[str] = None
    username: Optional[str] = None
    user_image: Optional[str] = None
    email: Optional[str] = None
    phone_number: Optional[str] = None
    bio: Optional[str] = None
    address_line1: Optional[str] = None
    address_line2: Optional[str] = None
    address_type: Optional[str] = None
    date_of_birth: Optional[date] = None
    created_at: datetime

    class Config:
        from_attributes = True


class Token(BaseModel):
    access_token: str
    refresh_token: str
    token_type: str = "bearer"
    user: UserResponse


class ProfileResponse(UserResponse):
    followers_count: int = 0
    following_count: int = 0


class PublicProfileResponse(BaseModel):
    """Another user's profile as seen by the caller"""
    id: str
    name: Optional[str] = None
    username: Optional[str] = None
    user_image: Optional[str] = None
    bio: Optional[str] = None
    followers_count: int = 0
    following_count: int = 0
    is_following: bool = False

    class Config:
        from_attributes = True


class ProfileUpdate(BaseModel):
    name: Optional[str] = Field(None, max_length=50)
    user_image: Optional[str] = None
    email: Optional[EmailStr] = None
    bio: Optional[str] = None
    address_line1: Optional[str] = None
    address_line2: Optional[str] = None
    address_type: Optional[Literal["Home", "Work", "Other"]] = None
    date_of_birth: Optional[date] = None


# Follow graph schemas
class FollowToggleResponse(BaseModel):
    state: Literal["followed", "unfollowed"]
    message: str


class FollowListItem(BaseModel):
    id: str
    name: Optional[str] = None
    username: Optional[str] = None
    user_image: Optional[str] = None
    is_following: bool


class UserSearchItem(BaseModel):
    id: str
    name: Optional[str] = None
    username: Optional[str] = None
    user_image: Optional[str] = None

    class Config:
        from_attributes = True


class UserSearchResponse(BaseModel):
    users: List[UserSearchItem]


# Salon schemas
class Location(BaseModel):
    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)


class Contact(BaseModel):
    phone: Optional[str] = None
    email: Optional[str] = None
    website: Optional[str] = None


class DayHours(BaseModel):
    open: Optional[str] = None
    close: Optional[str] = None


class ServiceItemBase(BaseModel):
    service_id: str = Field(..., min_length=1)
    title: str = Field(..., min_length=1)
    price: str = Field(..., min_length=1)
    duration: int = Field(30, ge=0)  # minutes
    description: Optional[str] = None


class ServiceItemResponse(ServiceItemBase):
    class Config:
        from_attributes = True


class ServiceCategoryCreate(BaseModel):
    name: str = Field(..., min_length=1)
    icon: str = "cut"
    is_active: bool = True
    services: List[ServiceItemBase] = []


class ServiceCategorySummary(BaseModel):
    """Category without its service line items"""
    id: int
    name: str
    icon: str
    is_active: bool

    class Config:
        from_attributes = True


class ServiceCategoryResponse(ServiceCategorySummary):
    services: List[ServiceItemResponse] = []


class StylistBase(BaseModel):
    profile_photo: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)
    rating: float = Field(..., ge=0, le=5)
    specialization: List[str] = []
    experience: str = ""
    is_active: bool = True


class StylistResponse(StylistBase):
    id: int

    class Config:
        from_attributes = True


class ReviewCreate(BaseModel):
    review_message: str = Field(..., min_length=1)
    rating: float = Field(..., ge=0, le=5)
    customer_name: str = Field(..., min_length=1)


class ReviewResponse(ReviewCreate):
    id: int
    created_at: datetime

    class Config:
        from_attributes = True


class SalonCreate(BaseModel):
    name: str = Field(..., min_length=1)
    images: List[str]
    location_name: str = Field(..., min_length=1)
    service_categories: List[ServiceCategoryCreate]
    description: str = Field(..., min_length=1)
    stylists: List[StylistBase]
    location: Location
    contact: Contact = Contact()
    operating_hours: Dict[str, DayHours] = {}
    amenities: List[str] = []
    reviews: List[ReviewCreate] = []


class SalonUpdate(BaseModel):
    """Partial replacement; collections given here replace the stored ones"""
    name: Optional[str] = Field(None, min_length=1)
    images: Optional[List[str]] = None
    location_name: Optional[str] = Field(None, min_length=1)
    service_categories: Optional[List[ServiceCategoryCreate]] = None
    description: Optional[str] = Field(None, min_length=1)
    stylists: Optional[List[StylistBase]] = None
    location: Optional[Location] = None
    contact: Optional[Contact] = None
    operating_hours: Optional[Dict[str, DayHours]] = None
    amenities: Optional[List[str]] = None
    reviews: Optional[List[ReviewCreate]] = None


class SalonSummary(BaseModel):
    """Listing projection: no reviews and no service line items"""
    id: str
    name: str
    images: List[str] = []
    location_name: str
    description: str
    location: Location
    contact: Contact
    operating_hours: Dict[str, DayHours] = {}
    amenities: List[str] = []
    average_price: str
    rating: float
    number_of_reviews: int
    is_active: bool
    created_at: datetime
    stylists: List[StylistResponse] = []
    service_categories: List[ServiceCategorySummary] = []

    class Config:
        from_attributes = True


class SalonResponse(SalonSummary):
    service_categories: List[ServiceCategoryResponse] = []
    reviews: List[ReviewResponse] = []


class SalonListResponse(BaseModel):
    count: int
    salons: List[SalonSummary]


class NearbySalonResponse(SalonSummary):
    distance: float  # kilometers, 2 decimals


class NearbySalonsResponse(BaseModel):
    count: int
    radius_km: float
    center: Location
    salons: List[NearbySalonResponse]


class MessageResponse(BaseModel):
    message: str
