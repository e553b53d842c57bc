"""
Swagger/OpenAPI configuration for the salon booking API
"""

SWAGGER_CONFIG = {
    "headers": [],
    "specs": [
        {
            "endpoint": "apispec",
            "route": "/apispec.json",
            "rule_filter": lambda rule: rule.rule.startswith("/api") or rule.rule == "/",
            "model_filter": lambda tag: True,
        }
    ],
    "static_url_path": "/flasgger_static",
    "swagger_ui": True,
    "specs_route": "/api/docs",
}

SWAGGER_TEMPLATE = {
    "swagger": "2.0",
    "info": {
        "title": "Salon Booking API",
        "description": "Bilingual (Arabic/English) salon marketplace: browse salons, book and pay for services, reviews, loyalty and AI recommendations. Messages are Arabic unless Accept-Language prefers English.",
        "version": "1.0.0",
    },
    "host": "",
    "basePath": "/",
    "schemes": ["http", "https"],
    "securityDefinitions": {
        "Bearer": {
            "type": "apiKey",
            "name": "Authorization",
            "in": "header",
            "description": 'JWT from /api/login. Example: "Authorization: Bearer {token}". The session cookie set at login works as well.',
        }
    },
    "security": [{"Bearer": []}],
    "tags": [
        {"name": "Authentication", "description": "Registration, login and profile"},
        {"name": "Salons", "description": "Salon browsing and filtering"},
        {"name": "Services", "description": "Salon services"},
        {"name": "Bookings", "description": "Booking lifecycle"},
        {"name": "Reviews", "description": "Salon reviews and owner responses"},
        {"name": "Owner", "description": "Salon owner management"},
        {"name": "Loyalty", "description": "Points, membership tiers and promotions"},
        {"name": "Payments", "description": "Card/Mada payments through Stripe"},
        {"name": "Recommendations", "description": "AI service recommendations"},
    ],
    "definitions": {
        "Error": {
            "type": "object",
            "properties": {
                "message": {"type": "string", "example": "الصالون غير موجود"},
                "error": {"type": "string"},
            },
        },
        "User": {
            "type": "object",
            "properties": {
                "id": {"type": "integer"},
                "username": {"type": "string"},
                "name": {"type": "string"},
                "email": {"type": "string", "format": "email"},
                "phoneNumber": {"type": "string"},
                "role": {"type": "string", "enum": ["customer", "salon_owner", "admin"]},
                "gender": {"type": "string"},
                "language": {"type": "string", "enum": ["ar", "en"]},
                "loyaltyPoints": {"type": "integer"},
                "membershipType": {"type": "string"},
            },
        },
        "Salon": {
            "type": "object",
            "properties": {
                "id": {"type": "integer"},
                "ownerId": {"type": "integer"},
                "name": {"type": "string"},
                "nameEn": {"type": "string"},
                "address": {"type": "string"},
                "city": {"type": "string"},
                "cityEn": {"type": "string"},
                "phoneNumber": {"type": "string"},
                "gender": {"type": "string", "enum": ["female_only", "male_only", "both"]},
                "hasPrivateRooms": {"type": "boolean"},
                "hasFemaleStaffOnly": {"type": "boolean"},
                "providesHomeService": {"type": "boolean"},
                "categories": {"type": "array", "items": {"type": "string"}},
                "amenities": {"type": "array", "items": {"type": "string"}},
                "latitude": {"type": "number", "format": "float"},
                "longitude": {"type": "number", "format": "float"},
                "rating": {"type": "number", "format": "float"},
                "reviewCount": {"type": "integer"},
            },
        },
        "Service": {
            "type": "object",
            "properties": {
                "id": {"type": "integer"},
                "salonId": {"type": "integer"},
                "name": {"type": "string"},
                "nameEn": {"type": "string"},
                "price": {"type": "number", "format": "float"},
                "discountedPrice": {"type": "number", "format": "float"},
                "category": {"type": "string"},
                "duration": {"type": "integer", "description": "Minutes"},
                "featured": {"type": "boolean"},
                "isAvailable": {"type": "boolean"},
                "isPromoted": {"type": "boolean"},
            },
        },
        "Booking": {
            "type": "object",
            "properties": {
                "id": {"type": "integer"},
                "userId": {"type": "integer"},
                "salonId": {"type": "integer"},
                "serviceId": {"type": "integer"},
                "staffId": {"type": "integer"},
                "status": {
                    "type": "string",
                    "enum": ["pending", "confirmed", "completed", "cancelled"],
                },
                "paymentStatus": {"type": "string", "enum": ["pending", "paid"]},
                "date": {"type": "string", "format": "date"},
                "time": {"type": "string", "example": "14:00"},
                "totalPrice": {"type": "number", "format": "float"},
                "paymentMethod": {"type": "string", "enum": ["card", "mada", "cash"]},
                "isRated": {"type": "boolean"},
            },
        },
        "BookingDetails": {
            "type": "object",
            "required": ["date", "time"],
            "properties": {
                "salonId": {"type": "integer"},
                "date": {"type": "string", "format": "date", "example": "2025-01-10"},
                "time": {"type": "string", "example": "14:00"},
                "paymentMethod": {"type": "string", "enum": ["card", "mada"]},
                "staffId": {"type": "integer"},
                "notes": {"type": "string"},
            },
        },
        "Review": {
            "type": "object",
            "properties": {
                "id": {"type": "integer"},
                "userId": {"type": "integer"},
                "salonId": {"type": "integer"},
                "rating": {"type": "number", "format": "float"},
                "comment": {"type": "string"},
                "ownerResponse": {"type": "string"},
                "isHidden": {"type": "boolean"},
                "date": {"type": "string", "format": "date-time"},
            },
        },
        "PaymentTransaction": {
            "type": "object",
            "properties": {
                "id": {"type": "integer"},
                "userId": {"type": "integer"},
                "bookingId": {"type": "integer"},
                "amount": {"type": "number", "format": "float"},
                "currency": {"type": "string", "example": "sar"},
                "paymentMethod": {"type": "string"},
                "status": {"type": "string", "example": "succeeded"},
                "gateway": {"type": "string", "example": "stripe"},
                "gatewayTransactionId": {"type": "string"},
            },
        },
        "Recommendation": {
            "type": "object",
            "properties": {
                "serviceId": {"type": "integer"},
                "serviceName": {"type": "string"},
                "score": {"type": "number", "minimum": 0, "maximum": 100},
                "reason": {"type": "string"},
            },
        },
    },
}
