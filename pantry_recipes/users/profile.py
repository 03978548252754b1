from __future__ import annotations

import base64
import binascii
import logging
import re
from typing import Any

from fastapi import HTTPException

from ..store.base import GraphStore
from ..store.records import UserRecord
from ..suggestions.preferences import (
    DietaryPreference,
    allergy_terms,
    parse_allergies,
    parse_dietary_preferences,
)

logger = logging.getLogger(__name__)

MAX_PICTURE_BYTES = 5 * 1024 * 1024

_DATA_URL = re.compile(r"^data:image/([a-zA-Z0-9.+-]+);base64,(.*)$", re.DOTALL)


def get_user_or_404(store: GraphStore, user_id: str) -> UserRecord:
    user = store.get_user(user_id)
    if user is None:
        raise HTTPException(status_code=404, detail="User not found")
    return user


def _updated_or_404(user: UserRecord | None) -> UserRecord:
    if user is None:
        raise HTTPException(status_code=404, detail="User not found")
    return user


def update_preferences(
    store: GraphStore,
    user_id: str,
    dietary_preferences: list[DietaryPreference],
    allergies: list[str],
) -> UserRecord:
    """Replace both lists. Allergies are stored as normalized terms."""
    get_user_or_404(store, user_id)
    values = list(dict.fromkeys(p.value for p in dietary_preferences))
    terms = allergy_terms(parse_allergies(allergies))
    logger.info("User %s preferences: %s, allergies: %s", user_id, values, terms)
    return _updated_or_404(
        store.update_user(user_id, dietary_preferences=values, allergies=terms)
    )


def update_profile(store: GraphStore, user_id: str, changes: dict[str, Any]) -> UserRecord:
    """Apply the provided ``name`` and ``age`` fields; at least one is required."""
    fields = {k: v for k, v in changes.items() if k in ("name", "age")}
    if not fields:
        raise HTTPException(status_code=400, detail="No fields to update")
    if "name" in fields and fields["name"] is not None:
        fields["name"] = fields["name"].strip() or None
    get_user_or_404(store, user_id)
    return _updated_or_404(store.update_user(user_id, **fields))


def validate_picture(data_url: str) -> str:
    match = _DATA_URL.match(data_url)
    if not match:
        raise HTTPException(
            status_code=400,
            detail="Profile picture must be a base64 encoded image data URL",
        )
    try:
        decoded = base64.b64decode(match.group(2), validate=True)
    except (binascii.Error, ValueError):
        raise HTTPException(status_code=400, detail="Profile picture is not valid base64")
    if len(decoded) > MAX_PICTURE_BYTES:
        raise HTTPException(status_code=400, detail="Profile picture must be 5MB or smaller")
    return data_url


def set_profile_picture(store: GraphStore, user_id: str, data_url: str | None) -> UserRecord:
    """Store a validated data URL, or remove the picture when ``None``."""
    picture = validate_picture(data_url) if data_url else None
    get_user_or_404(store, user_id)
    return _updated_or_404(store.update_user(user_id, profile_picture=picture))


def preference_diagnostics(store: GraphStore, user_id: str) -> dict[str, Any]:
    """Raw and parsed preference values, for checking what suggestions will see."""
    user = get_user_or_404(store, user_id)
    parsed_preferences = parse_dietary_preferences(user.dietary_preferences)
    parsed_allergies = parse_allergies(user.allergies)
    return {
        "userId": user.id,
        "email": user.email,
        "rawDietaryPreferences": user.dietary_preferences,
        "rawAllergies": user.allergies,
        "parsedDietaryPreferences": [p.value for p in parsed_preferences],
        "parsedAllergies": allergy_terms(parsed_allergies),
        "hasPreferences": bool(parsed_preferences),
        "hasAllergies": bool(parsed_allergies),
    }
