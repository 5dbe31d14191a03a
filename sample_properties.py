"""
sample_properties.py - Demo listings for the local dev server and table seeding
"""

from property_service import DEFAULT_USER_ID, utc_timestamp

SAMPLE_PROPERTIES = [
    {
        "id": "1",
        "title": "Modern Family Home",
        "price": 750000,
        "location": "Beverly Hills, CA",
        "bedrooms": 4,
        "bathrooms": 3,
        "area": 2500,
        "image": "https://images.unsplash.com/photo-1600596542815-ffad4c1539a9?w=600&h=400&fit=crop",
        "type": "sale",
        "featured": True,
        "description": "Beautiful modern home with stunning architecture",
    },
    {
        "id": "2",
        "title": "Luxury Downtown Apartment",
        "price": 3500,
        "location": "Manhattan, NY",
        "bedrooms": 2,
        "bathrooms": 2,
        "area": 1200,
        "image": "https://images.unsplash.com/photo-1522708323590-d24dbb6b0267?w=600&h=400&fit=crop",
        "type": "rent",
        "featured": False,
        "description": "Luxury apartment in the heart of the city",
    },
    {
        "id": "3",
        "title": "Cozy Suburban House",
        "price": 450000,
        "location": "Austin, TX",
        "bedrooms": 3,
        "bathrooms": 2,
        "area": 1800,
        "image": "https://images.unsplash.com/photo-1605146769289-440113cc3d00?w=600&h=400&fit=crop",
        "type": "sale",
        "featured": False,
        "description": "Perfect family home in quiet neighborhood",
    },
    {
        "id": "4",
        "title": "Ocean View Villa",
        "price": 1200000,
        "location": "Malibu, CA",
        "bedrooms": 5,
        "bathrooms": 4,
        "area": 3500,
        "image": "https://images.unsplash.com/photo-1613490493576-7fde63acd811?w=600&h=400&fit=crop",
        "type": "sale",
        "featured": True,
        "description": "Stunning villa with panoramic ocean views",
    },
    {
        "id": "5",
        "title": "Student Studio",
        "price": 1200,
        "location": "Boston, MA",
        "bedrooms": 1,
        "bathrooms": 1,
        "area": 500,
        "image": "https://images.unsplash.com/photo-1502672260266-1c1ef2d93688?w=600&h=400&fit=crop",
        "type": "rent",
        "featured": False,
        "description": "Affordable studio apartment near university",
    },
    {
        "id": "6",
        "title": "Historic Townhouse",
        "price": 650000,
        "location": "Charleston, SC",
        "bedrooms": 3,
        "bathrooms": 3,
        "area": 2200,
        "image": "https://images.unsplash.com/photo-1570129477492-45c003edd2be?w=600&h=400&fit=crop",
        "type": "sale",
        "featured": False,
        "description": "Charming historic home with modern updates",
    },
]


def sample_records(timestamp=None):
    """Return fresh copies of the sample listings stamped with timestamps and the demo user."""
    timestamp = timestamp or utc_timestamp()
    return [
        {**listing, "createdAt": timestamp, "updatedAt": timestamp, "userId": DEFAULT_USER_ID}
        for listing in SAMPLE_PROPERTIES
    ]
