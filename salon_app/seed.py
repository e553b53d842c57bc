"""
Demo data loaded into a fresh store on startup (SEED_DEMO_DATA).

Every demo account shares DEMO_PASSWORD.
"""

from datetime import date, timedelta

from .utils.auth_utils import hash_password

DEMO_PASSWORD = "password123"

USERS = [
    {
        "username": "admin",
        "name": "Admin",
        "email": "admin@saloon.com",
        "phone_number": "+966123456789",
        "role": "admin",
        "gender": "other",
    },
    {
        "username": "femaleowner",
        "name": "منيرة العتيبي",
        "email": "female.owner@salon.com",
        "phone_number": "+966987654321",
        "role": "salon_owner",
        "gender": "female",
        "profile_image": "https://randomuser.me/api/portraits/women/54.jpg",
    },
    {
        "username": "maleowner",
        "name": "محمد القحطاني",
        "email": "male.owner@salon.com",
        "phone_number": "+966987654322",
        "role": "salon_owner",
        "gender": "male",
        "profile_image": "https://randomuser.me/api/portraits/men/32.jpg",
    },
    {
        "username": "customer",
        "name": "سارة محمد",
        "email": "customer@example.com",
        "phone_number": "+966555555555",
        "role": "customer",
        "gender": "female",
        "preferences": "female_only",
        "profile_image": "https://randomuser.me/api/portraits/women/22.jpg",
    },
    {
        "username": "malecustomer",
        "name": "عبدالله السعيد",
        "email": "male.customer@example.com",
        "phone_number": "+966555555556",
        "role": "customer",
        "gender": "male",
        "preferences": "male_only",
        "profile_image": "https://randomuser.me/api/portraits/men/22.jpg",
    },
]

# owner is the username of the owning account
SALONS = [
    {
        "owner": "femaleowner",
        "name": "صالون لمسات الجمال",
        "name_en": "Beauty Touches Salon",
        "description": "صالون متخصص في الشعر والمكياج مع خبرة أكثر من 10 سنوات",
        "description_en": "Specialized salon for hair and makeup with over 10 years of experience",
        "address": "شارع الملك فهد، حي العليا، الرياض",
        "address_en": "King Fahd Road, Olaya District, Riyadh",
        "city": "الرياض",
        "city_en": "Riyadh",
        "district": "العليا",
        "district_en": "Olaya",
        "phone_number": "+966112345678",
        "email": "beauty.touches@example.com",
        "gender": "female_only",
        "has_private_rooms": True,
        "has_female_staff_only": True,
        "opening_hours": "9:00 - 21:00",
        "latitude": 24.7136,
        "longitude": 46.6753,
        "amenities": "wifi,parking,coffee",
        "categories": "haircut,makeup,nails,spa",
        "verified": True,
    },
    {
        "owner": "femaleowner",
        "name": "أنيقة سبا",
        "name_en": "Elegance Spa",
        "description": "مركز متكامل للعناية بالبشرة والجسم مع أحدث التقنيات",
        "description_en": "Integrated center for skin and body care with the latest technologies",
        "address": "شارع التحلية، حي الروضة، جدة",
        "address_en": "Tahlia Street, Al Rawdah District, Jeddah",
        "city": "جدة",
        "city_en": "Jeddah",
        "district": "الروضة",
        "district_en": "Al Rawdah",
        "phone_number": "+966622345678",
        "email": "elegance.spa@example.com",
        "gender": "female_only",
        "has_private_rooms": True,
        "provides_home_service": True,
        "opening_hours": "10:00 - 22:00",
        "latitude": 21.5433,
        "longitude": 39.1728,
        "amenities": "wifi,parking,coffee,childcare",
        "categories": "facial,spa,massage,bodycare",
        "verified": True,
    },
    {
        "owner": "maleowner",
        "name": "بارون للحلاقة",
        "name_en": "Baron Barber Shop",
        "description": "صالون رجالي متميز بأجواء كلاسيكية وخدمات عصرية",
        "description_en": "Distinguished men's salon with classic ambiance and modern services",
        "address": "شارع العروبة، حي الحمراء، الرياض",
        "address_en": "Al Urubah Road, Al Hamra District, Riyadh",
        "city": "الرياض",
        "city_en": "Riyadh",
        "district": "الحمراء",
        "district_en": "Al Hamra",
        "phone_number": "+966115555678",
        "email": "baron.barber@example.com",
        "gender": "male_only",
        "opening_hours": "8:00 - 23:00",
        "latitude": 24.7276,
        "longitude": 46.6977,
        "amenities": "wifi,parking,coffee,tv",
        "categories": "haircut,shave,facial,massage",
        "verified": True,
    },
    {
        "owner": "maleowner",
        "name": "واحة الجمال",
        "name_en": "Oasis Beauty Salon",
        "description": "صالون تجميل نسائي متميز يقدم جميع خدمات التجميل والعناية بالبشرة والشعر",
        "description_en": "A distinguished women's beauty salon offering beauty, skin and hair care services",
        "address": "شارع الظهران، حي المبرز، الأحساء",
        "address_en": "Dhahran Street, Al Mubarraz District, Al-Ahsa",
        "city": "الأحساء",
        "city_en": "Al-Ahsa",
        "district": "المبرز",
        "district_en": "Al Mubarraz",
        "phone_number": "+966554789123",
        "email": "oasisbeauty@example.com",
        "gender": "female_only",
        "has_female_staff_only": True,
        "provides_home_service": True,
        "opening_hours": "9:00 - 22:00",
        "latitude": 25.4167,
        "longitude": 49.5833,
        "amenities": "wifi,parking,coffee,prayer_area,kids_play_area",
        "categories": "hair,makeup,nails,facial,spa,bridal,henna",
    },
    {
        "owner": "maleowner",
        "name": "الأصالة للحلاقة الرجالية",
        "name_en": "Al Asala Men's Salon",
        "description": "صالون حلاقة رجالي تقليدي مع لمسة من التراث السعودي الأصيل",
        "description_en": "A traditional men's barber shop with a touch of authentic Saudi heritage",
        "address": "طريق الملك فهد، حي الهفوف، الأحساء",
        "address_en": "King Fahd Road, Al Hofuf District, Al-Ahsa",
        "city": "الأحساء",
        "city_en": "Al-Ahsa",
        "district": "الهفوف",
        "district_en": "Al Hofuf",
        "phone_number": "+966556789012",
        "email": "alasala@example.com",
        "gender": "male_only",
        "provides_home_service": True,
        "opening_hours": "10:00 - 23:00",
        "latitude": 25.3783,
        "longitude": 49.5869,
        "amenities": "wifi,parking,coffee,prayer_area,tv",
        "categories": "haircut,beard,skin_care,traditional_shave",
    },
    {
        "owner": "maleowner",
        "name": "سيدرا سبا",
        "name_en": "Sidra Spa & Beauty",
        "description": "مركز سبا وتجميل متكامل للنساء في بيئة فاخرة وهادئة",
        "description_en": "A comprehensive spa and beauty center for women in a luxurious and tranquil environment",
        "address": "شارع الأمير محمد بن فهد، حي العزيزية، الأحساء",
        "address_en": "Prince Mohammed Bin Fahd Street, Al Aziziyah District, Al-Ahsa",
        "city": "الأحساء",
        "city_en": "Al-Ahsa",
        "district": "العزيزية",
        "district_en": "Al Aziziyah",
        "phone_number": "+966557890123",
        "email": "sidraspa@example.com",
        "gender": "female_only",
        "has_private_rooms": True,
        "has_female_staff_only": True,
        "opening_hours": "10:00 - 22:00",
        "latitude": 25.4,
        "longitude": 49.6,
        "amenities": "wifi,parking,refreshments,steam_room,sauna,jacuzzi,prayer_area",
        "categories": "spa,massage,facial,body_treatments,hair,makeup",
    },
    {
        "owner": "maleowner",
        "name": "أريج للتجميل",
        "name_en": "Areej Beauty Center",
        "description": "مركز تجميل متكامل يقدم خدمات العناية بالبشرة والشعر والأظافر والمكياج",
        "description_en": "A beauty center offering skin care, hair, nails and makeup services",
        "address": "شارع الخليج، حي المطيرفي، الأحساء",
        "address_en": "Al Khaleej Street, Al Mutairfi District, Al-Ahsa",
        "city": "الأحساء",
        "city_en": "Al-Ahsa",
        "district": "المطيرفي",
        "district_en": "Al Mutairfi",
        "phone_number": "+966558901234",
        "email": "areejbeauty@example.com",
        "gender": "both",
        "opening_hours": "9:00 - 21:00",
        "latitude": 25.395,
        "longitude": 49.593,
        "amenities": "wifi,parking,refreshments,prayer_area",
        "categories": "hair,makeup,nails,facial,bridal",
    },
]

# salon is the 1-based position in SALONS
SERVICES = [
    (1, "قص شعر", "Haircut", "haircut", 150, 45, True),
    (1, "صبغ شعر", "Hair Coloring", "haircut", 300, 120, False),
    (1, "مكياج سهرة", "Evening Makeup", "makeup", 250, 60, True),
    (1, "مانيكير", "Manicure", "nails", 100, 45, False),
    (1, "باديكير", "Pedicure", "nails", 120, 45, False),
    (2, "تنظيف بشرة عميق", "Deep Facial Cleaning", "facial", 200, 60, True),
    (2, "مساج استرخائي", "Relaxing Massage", "massage", 350, 90, True),
    (2, "حمام مغربي", "Moroccan Bath", "bodycare", 300, 120, False),
    (3, "قص وتصفيف شعر", "Haircut and Styling", "haircut", 80, 30, True),
    (3, "حلاقة ذقن", "Beard Shave", "shave", 60, 30, True),
    (3, "مساج وجه", "Facial Massage", "facial", 100, 30, False),
]

STAFF = [
    (1, "نورة الشهري", "Noura Al Shehri", "مصففة شعر", "Hair Stylist", "female"),
    (1, "هند العنزي", "Hind Al Anazi", "خبيرة مكياج", "Makeup Artist", "female"),
    (2, "ريم الدوسري", "Reem Al Dosari", "أخصائية بشرة", "Skin Specialist", "female"),
    (3, "فهد الحربي", "Fahad Al Harbi", "حلاق", "Barber", "male"),
]

MEMBERSHIP_TIERS = [
    {
        "name": "برونزي",
        "name_en": "Bronze",
        "points_threshold": 0,
        "discount_percentage": 0,
        "benefits": ["Earn 10 points per paid booking"],
    },
    {
        "name": "فضي",
        "name_en": "Silver",
        "points_threshold": 100,
        "discount_percentage": 5,
        "benefits": ["5% off every booking", "Priority support"],
    },
    {
        "name": "ذهبي",
        "name_en": "Gold",
        "points_threshold": 300,
        "discount_percentage": 10,
        "benefits": ["10% off every booking", "Free home service once a month"],
    },
]


def seed_demo_data(storage, rounds=12):
    """Populate an empty store. Does nothing when users already exist."""
    if storage.get_user_by_username("admin") is not None:
        return False

    password_hash = hash_password(DEMO_PASSWORD, rounds)
    users = {}
    for fields in USERS:
        user = storage.create_user(dict(fields, password_hash=password_hash))
        users[user.username] = user

    bronze = MEMBERSHIP_TIERS[0]["name_en"]
    for user in users.values():
        if user.role == "customer":
            storage.update_user_membership_type(user.id, bronze)

    salons = []
    for fields in SALONS:
        fields = dict(fields)
        owner = users[fields.pop("owner")]
        salons.append(storage.create_salon(dict(fields, owner_id=owner.id)))

    for position, name, name_en, category, price, duration, featured in SERVICES:
        storage.create_service(
            {
                "salon_id": salons[position - 1].id,
                "name": name,
                "name_en": name_en,
                "category": category,
                "category_en": category,
                "price": price,
                "duration": duration,
                "featured": featured,
            }
        )

    for position, name, name_en, specialization, specialization_en, gender in STAFF:
        storage.create_staff(
            {
                "salon_id": salons[position - 1].id,
                "name": name,
                "name_en": name_en,
                "specialization": specialization,
                "specialization_en": specialization_en,
                "gender": gender,
            }
        )

    for fields in MEMBERSHIP_TIERS:
        storage.create_membership_tier(dict(fields))

    today = date.today()
    storage.create_promotion(
        {
            "salon_id": salons[0].id,
            "code": "WELCOME20",
            "title": "خصم 20% للعملاء الجدد",
            "title_en": "20% off for new customers",
            "discount_type": "percentage",
            "discount_value": 20,
            "start_date": today,
            "end_date": today + timedelta(days=90),
            "is_active": True,
        }
    )
    return True
