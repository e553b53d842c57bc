"""
Localized API messages.

Arabic is the default language of every response; English is used when the
client's Accept-Language header prefers it.
"""

from flask import current_app, has_request_context, jsonify, request

SUPPORTED_LANGUAGES = ("ar", "en")

MESSAGES = {
    # Auth
    "login_required": ("يجب تسجيل الدخول", "You must be logged in"),
    "forbidden": ("غير مصرح", "Not authorized"),
    "invalid_credentials": (
        "اسم المستخدم أو كلمة المرور غير صحيحة",
        "Invalid username or password",
    ),
    "invalid_registration": ("بيانات التسجيل غير صالحة", "Invalid registration data"),
    "username_taken": ("اسم المستخدم موجود بالفعل", "Username already exists"),
    "email_taken": ("البريد الإلكتروني مستخدم بالفعل", "Email already in use"),
    "registration_error": ("حدث خطأ أثناء التسجيل", "Registration failed"),
    "login_error": ("حدث خطأ أثناء تسجيل الدخول", "Login failed"),
    "logged_out": ("تم تسجيل الخروج", "Logged out"),
    "invalid_profile": ("بيانات الملف الشخصي غير صالحة", "Invalid profile data"),
    "profile_error": ("حدث خطأ أثناء تحديث الملف الشخصي", "Failed to update profile"),
    # Salons and services
    "salons_error": ("حدث خطأ أثناء استرجاع الصالونات", "Failed to fetch salons"),
    "salon_error": ("حدث خطأ أثناء استرجاع الصالون", "Failed to fetch salon"),
    "salon_not_found": ("الصالون غير موجود", "Salon not found"),
    "invalid_salon": ("بيانات الصالون غير صالحة", "Invalid salon data"),
    "salon_save_error": ("حدث خطأ أثناء حفظ الصالون", "Failed to save salon"),
    "services_error": ("حدث خطأ أثناء استرجاع الخدمات", "Failed to fetch services"),
    "featured_error": (
        "حدث خطأ أثناء استرجاع الخدمات المميزة",
        "Failed to fetch featured services",
    ),
    "service_error": ("حدث خطأ أثناء استرجاع الخدمة", "Failed to fetch service"),
    "service_not_found": ("الخدمة غير موجودة", "Service not found"),
    "invalid_service": ("بيانات الخدمة غير صالحة", "Invalid service data"),
    "service_save_error": ("حدث خطأ أثناء حفظ الخدمة", "Failed to save service"),
    "staff_error": ("حدث خطأ أثناء استرجاع الموظفين", "Failed to fetch staff"),
    "staff_not_found": ("الموظف غير موجود", "Staff member not found"),
    "invalid_staff": ("بيانات الموظف غير صالحة", "Invalid staff data"),
    "staff_save_error": ("حدث خطأ أثناء حفظ بيانات الموظف", "Failed to save staff member"),
    # Bookings
    "bookings_error": ("حدث خطأ أثناء استرجاع الحجوزات", "Failed to fetch bookings"),
    "booking_error": ("حدث خطأ أثناء استرجاع الحجز", "Failed to fetch booking"),
    "invalid_booking": ("بيانات الحجز غير صالحة", "Invalid booking data"),
    "booking_create_error": ("حدث خطأ أثناء إنشاء الحجز", "Failed to create booking"),
    "invalid_booking_status": ("حالة الحجز غير صالحة", "Invalid booking status"),
    "booking_not_found": ("الحجز غير موجود", "Booking not found"),
    "booking_status_error": (
        "حدث خطأ أثناء تحديث حالة الحجز",
        "Failed to update booking status",
    ),
    # Reviews
    "reviews_error": ("حدث خطأ أثناء استرجاع التقييمات", "Failed to fetch reviews"),
    "invalid_review": ("بيانات التقييم غير صالحة", "Invalid review data"),
    "review_create_error": ("حدث خطأ أثناء إضافة التقييم", "Failed to post review"),
    "review_not_found": ("التقييم غير موجود", "Review not found"),
    "review_update_error": ("حدث خطأ أثناء تحديث التقييم", "Failed to update review"),
    # Promotions and loyalty
    "promotions_error": ("حدث خطأ أثناء استرجاع العروض", "Failed to fetch promotions"),
    "promotion_not_found": ("العرض غير موجود", "Promotion not found"),
    "invalid_promotion": ("بيانات العرض غير صالحة", "Invalid promotion data"),
    "promotion_save_error": ("حدث خطأ أثناء حفظ العرض", "Failed to save promotion"),
    "tiers_error": ("حدث خطأ أثناء استرجاع مستويات العضوية", "Failed to fetch membership tiers"),
    "tier_not_found": ("مستوى العضوية غير موجود", "Membership tier not found"),
    "invalid_tier": ("بيانات مستوى العضوية غير صالحة", "Invalid membership tier data"),
    "tier_save_error": ("حدث خطأ أثناء حفظ مستوى العضوية", "Failed to save membership tier"),
    "loyalty_error": ("حدث خطأ أثناء استرجاع نقاط الولاء", "Failed to fetch loyalty points"),
    # Payments
    "invalid_payment": ("بيانات الدفع غير صالحة", "Invalid payment data"),
    "payment_intent_error": ("حدث خطأ أثناء إنشاء عملية الدفع", "Failed to create payment"),
    "payment_not_succeeded": ("لم تتم عملية الدفع بنجاح", "Payment was not successful"),
    "payment_already_processed": (
        "تمت معالجة عملية الدفع مسبقاً",
        "This payment has already been processed",
    ),
    "payment_confirm_error": ("حدث خطأ أثناء تأكيد الحجز", "Failed to confirm booking"),
    "transactions_error": ("حدث خطأ أثناء استرجاع المعاملات", "Failed to fetch transactions"),
    # Recommendations
    "recommendations_ready": ("توصيات مخصصة لك", "Personalized recommendations for you"),
    "recommendations_error": ("حدث خطأ أثناء استرجاع التوصيات", "Failed to fetch recommendations"),
    "welcome_error": ("حدث خطأ أثناء إنشاء رسالة الترحيب", "Failed to create welcome message"),
    "welcome_fallback": ("أهلاً بك في تطبيق الصالون!", "Welcome to our salon app!"),
    "suggested_times_error": ("حدث خطأ أثناء اقتراح المواعيد", "Failed to suggest times"),
    # Generic
    "not_found": ("المورد غير موجود", "Resource not found"),
    "method_not_allowed": ("الطريقة غير مسموحة", "Method not allowed"),
    "server_error": ("حدث خطأ في الخادم", "Internal server error"),
}


def request_language():
    default = "ar"
    if has_request_context():
        default = current_app.config.get("DEFAULT_LANGUAGE", "ar")
        best = request.accept_languages.best_match(SUPPORTED_LANGUAGES)
        if best:
            return best
    return default


def t(key, lang=None):
    """Translate a message key; unknown keys are returned unchanged."""
    pair = MESSAGES.get(key)
    if pair is None:
        return key
    lang = lang or request_language()
    return pair[1] if lang == "en" else pair[0]


def error_response(key, status, error=None):
    body = {"message": t(key)}
    if error is not None:
        body["error"] = error
    return jsonify(body), status
