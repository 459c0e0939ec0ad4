"""Seed initial data for development

Run this script to create:
- Three demo users that follow each other
- Two salons in Bengaluru with services, stylists and reviews

Usage:
    python seed_data.py
"""
from salonhub.core.database import SessionLocal, init_db
from salonhub.core.security import get_password_hash
from salonhub.models.models import User, UserFollow, Salon
from salonhub.schemas.schemas import SalonCreate
from salonhub.services.salon_service import create_salon


DEMO_SALONS = [
    {
        "name": "Bella Salon & Spa",
        "images": ["https://example.com/bella/front.jpg"],
        "location_name": "Indiranagar, Bengaluru",
        "description": "Full service salon and spa",
        "location": {"latitude": 12.9719, "longitude": 77.6412},
        "contact": {"phone": "+919800000001", "email": "hello@bella.example"},
        "amenities": ["WiFi", "AC", "Parking"],
        "service_categories": [
            {
                "name": "Hair",
                "services": [
                    {"service_id": "hair-cut", "title": "Haircut & Styling", "price": "₹450", "duration": 45},
                    {"service_id": "hair-color", "title": "Hair Coloring", "price": "₹1,800", "duration": 120},
                ],
            },
            {
                "name": "Nails",
                "icon": "hand",
                "services": [
                    {"service_id": "mani", "title": "Manicure", "price": "₹600", "duration": 40},
                ],
            },
        ],
        "stylists": [
            {"profile_photo": "https://example.com/bella/asha.jpg", "name": "Asha", "rating": 4.8,
             "specialization": ["Hair"], "experience": "6 years"},
        ],
        "reviews": [
            {"review_message": "Great haircut", "rating": 5, "customer_name": "Ravi"},
            {"review_message": "A bit crowded", "rating": 4, "customer_name": "Meera"},
        ],
    },
    {
        "name": "Urban Trim",
        "images": ["https://example.com/urban/front.jpg"],
        "location_name": "Koramangala, Bengaluru",
        "description": "Quick grooming for busy people",
        "location": {"latitude": 12.9352, "longitude": 77.6245},
        "service_categories": [
            {
                "name": "Grooming",
                "services": [
                    {"service_id": "beard", "title": "Beard Trim", "price": "₹200", "duration": 20},
                ],
            },
        ],
        "stylists": [
            {"profile_photo": "https://example.com/urban/kiran.jpg", "name": "Kiran", "rating": 4.5},
        ],
    },
]


def seed_data():
    init_db()
    db = SessionLocal()

    try:
        # Check if data already exists
        if db.query(User).first() or db.query(Salon).first():
            print("Data already exists. Skipping seed.")
            return

        users = [
            User(email="ananya@example.com", username="ananya", name="Ananya Rao",
                 hashed_password=get_password_hash("demo1234")),
            User(email="vikram@example.com", username="vikram", name="Vikram Shah",
                 hashed_password=get_password_hash("demo1234")),
            User(email="leela@example.com", username="leela", name="Leela Iyer",
                 hashed_password=get_password_hash("demo1234")),
        ]
        db.add_all(users)
        db.flush()
        print(f"✓ Created {len(users)} users (password: demo1234)")

        ananya, vikram, leela = users
        db.add_all([
            UserFollow(follower_id=ananya.id, following_id=vikram.id),
            UserFollow(follower_id=vikram.id, following_id=ananya.id),
            UserFollow(follower_id=leela.id, following_id=ananya.id),
        ])
        db.commit()
        print("✓ Created follow relationships")

        for payload in DEMO_SALONS:
            salon = create_salon(db, SalonCreate(**payload))
            print(f"✓ Created salon: {salon.name} (avg {salon.average_price}, rating {salon.rating})")

        print("\n" + "=" * 50)
        print("✅ Seed data created successfully!")
        print("=" * 50)

    except Exception as e:
        db.rollback()
        print(f"❌ Error seeding data: {e}")
        raise
    finally:
        db.close()


if __name__ == "__main__":
    print("Seeding database with initial data...")
    seed_data()
