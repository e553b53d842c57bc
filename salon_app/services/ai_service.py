"""
LLM-backed service recommendations.

Every entry point degrades to a deterministic answer when the model is not
configured, cannot be reached, or replies with something unusable.
"""

import json
from datetime import date

from flask import current_app
from pydantic import ValidationError

from ..messages import t
from ..schemas import AIRecommendation, AIRecommendationPayload, AITimeSuggestions

FALLBACK_REASON = "Based on your preferences and popular services in your area"
DEFAULT_TIMES = ["10:00 AM", "02:00 PM", "05:30 PM"]

RECOMMENDATION_SYSTEM_PROMPT = (
    "You are an AI assistant for a salon booking application in Saudi Arabia. "
    "Your task is to recommend salon services based on user preferences, booking "
    "history, and available services. Provide culturally appropriate "
    "recommendations, respecting gender-specific preferences."
)


class RecommendationMismatch(Exception):
    """The model's reply could not be turned into valid recommendations."""


def prefers_arabic(user):
    if user.preferences and "arabic" in user.preferences.lower():
        return True
    return (user.language or "ar") == "ar"


def fallback_recommendations(candidates, limit):
    return [
        AIRecommendation(
            service_id=service.id,
            service_name=service.display_name,
            score=90 - index * 10,
            reason=FALLBACK_REASON,
        )
        for index, service in enumerate(candidates[:limit])
    ]


def build_recommendation_prompt(user, candidates, history, salon_id, preferences, limit):
    lines = [
        "User profile:",
        f"- Name: {user.name}",
        f"- Gender: {user.gender or 'Not specified'}",
        f"- Preferences: {user.preferences or 'Not specified'}",
        f"- Previous bookings: {len(history)} services booked",
    ]
    if history:
        recent = ", ".join(f"{b.service_id} ({b.date.isoformat()})" for b in history)
        lines.append(f"- Recent bookings: {recent}")
    lines.append(f"- Additional preferences: {', '.join(preferences) or 'None specified'}")

    lines += ["", "Available services to recommend from:"]
    for index, service in enumerate(candidates, start=1):
        lines.append(
            f"{index}. ID: {service.id}, Name: {service.display_name}, "
            f"Category: {service.category}, Price: {service.price} SAR, "
            f"Duration: {service.duration} minutes, "
            f"Description: {service.description_en or service.description or ''}"
        )

    lines += ["", "Constraints:"]
    if salon_id:
        lines.append(f"- Only recommend services from salon ID: {salon_id}")
    lines += [
        "- Only use service IDs from the list above",
        "- Prioritize services that match the user's preferences and past bookings",
        "- Consider cultural relevance for Saudi Arabian context",
        "",
        f"Please recommend {limit} salon services for this user. Respond with a JSON "
        'object {"recommendations": [{"serviceId", "serviceName", "score", "reason"}]} '
        "where score is 0 to 100 and reason is one short sentence.",
    ]
    return "\n".join(lines)


def _first_array(parsed, preferred_keys):
    if not isinstance(parsed, dict):
        return None
    for key in preferred_keys:
        if isinstance(parsed.get(key), list):
            return parsed[key]
    for value in parsed.values():
        if isinstance(value, list):
            return value
    return None


def parse_recommendations(content, candidate_ids):
    try:
        parsed = json.loads(content or "")
    except ValueError as e:
        raise RecommendationMismatch(f"Reply is not JSON: {e}") from e

    items = _first_array(parsed, ("recommendations",))
    if items is None and isinstance(parsed, dict):
        items = [v for v in parsed.values() if isinstance(v, dict) and "serviceId" in v]

    try:
        payload = AIRecommendationPayload.model_validate({"recommendations": items or []})
    except ValidationError as e:
        raise RecommendationMismatch(str(e)) from e

    unknown = [r.service_id for r in payload.recommendations if r.service_id not in candidate_ids]
    if unknown:
        raise RecommendationMismatch(f"Unknown service ids in reply: {unknown}")
    return payload.recommendations


class RecommendationService:
    def __init__(self, client=None, model="gpt-4o", max_limit=5):
        self.client = client
        self.model = model
        self.max_limit = max_limit

    def clamp_limit(self, limit):
        try:
            limit = int(limit)
        except (TypeError, ValueError):
            limit = 3
        return max(1, min(limit, self.max_limit))

    def _complete(self, messages, **kwargs):
        if self.client is None:
            raise RuntimeError("No LLM client configured")
        response = self.client.chat.completions.create(
            model=self.model, messages=messages, **kwargs
        )
        return response.choices[0].message.content

    def recommend(self, user, candidates, history=None, salon_id=None, preferences=None, limit=3):
        """
        Rank ``candidates`` for ``user``. Returns at most ``limit`` (clamped to
        [1, max_limit]) camelCase dicts sorted by score, highest first.
        """
        limit = self.clamp_limit(limit)
        candidates = list(candidates)
        prompt = build_recommendation_prompt(
            user, candidates, history or [], salon_id, preferences or [], limit
        )

        try:
            content = self._complete(
                [
                    {"role": "system", "content": RECOMMENDATION_SYSTEM_PROMPT},
                    {"role": "user", "content": prompt},
                ],
                response_format={"type": "json_object"},
            )
            recommendations = parse_recommendations(
                content, {service.id for service in candidates}
            )
        except Exception as e:
            current_app.logger.warning(f"Using fallback recommendations: {e}")
            recommendations = fallback_recommendations(candidates, limit)

        recommendations = sorted(recommendations, key=lambda r: r.score, reverse=True)
        return [r.model_dump(by_alias=True) for r in recommendations[:limit]]

    def welcome_message(self, user, recommendations):
        arabic = prefers_arabic(user)
        fallback = t("welcome_fallback", "ar" if arabic else "en")
        system_prompt = (
            "You are a welcoming virtual assistant for a salon booking app in Saudi Arabia. "
            "Generate a personalized welcome message for the user that is warm, culturally "
            "appropriate, and mentions recommended services. "
            f"The message should be in {'Arabic' if arabic else 'English'}. "
            "Keep the message concise (maximum 2 sentences)."
        )
        names = ", ".join(r["serviceName"] for r in recommendations)
        user_info = (
            f"User: {user.name}\n"
            f"Gender: {user.gender or 'Not specified'}\n"
            f"Recommendations: {names}"
        )
        try:
            content = self._complete(
                [
                    {"role": "system", "content": system_prompt},
                    {"role": "user", "content": user_info},
                ],
                max_tokens=150,
            )
        except Exception as e:
            current_app.logger.warning(f"Using fallback welcome message: {e}")
            return fallback
        return (content or "").strip() or fallback

    def suggest_times(self, service, user):
        today = date.today()
        # Friday and Saturday
        weekend = today.weekday() in (4, 5)
        system_prompt = (
            "You are a scheduling assistant for a salon in Saudi Arabia. "
            "Suggest 3 appropriate appointment times for a user booking a salon service. "
            "Consider the time of day, day of week, and cultural norms in Saudi Arabia. "
            f"Today is {today.isoformat()}, which is a {'weekend' if weekend else 'weekday'}. "
            'Return a JSON object {"times": [...]} with times formatted as "HH:MM AM/PM".'
        )
        user_info = (
            f"Service: {service.display_name}\n"
            f"Service duration: {service.duration} minutes\n"
            f"User gender: {user.gender or 'Not specified'}"
        )
        try:
            content = self._complete(
                [
                    {"role": "system", "content": system_prompt},
                    {"role": "user", "content": user_info},
                ],
                response_format={"type": "json_object"},
            )
            times = _first_array(json.loads(content or ""), ("times", "suggestions"))
            return AITimeSuggestions.model_validate({"times": times or []}).times
        except Exception as e:
            current_app.logger.warning(f"Using default appointment times: {e}")
            return list(DEFAULT_TIMES)
