"""
Loyalty program settings.

A single stored preference record; nothing accrues points from it automatically.
"""

from __future__ import annotations

from typing import Any

from sqlalchemy import select

from orderly_shared.constants import DEFAULT_AMOUNT_THRESHOLD, DEFAULT_POINTS_PER_AMOUNT
from orderly_shared.datetime_utils import utcnow
from orderly_shared.db import get_session
from orderly_shared.logging_config import get_logger
from orderly_shared.models import LoyaltySettings
from orderly_shared.query_cache import loyalty_settings_changed
from orderly_shared.schemas import LoyaltySettingsRecord, LoyaltySettingsUpdate, parse_payload

logger = get_logger(__name__)


def _get_or_create(session) -> LoyaltySettings:
    settings = (
        session.execute(select(LoyaltySettings).order_by(LoyaltySettings.id)).scalars().first()
    )
    if settings is None:
        settings = LoyaltySettings(
            points_per_amount=DEFAULT_POINTS_PER_AMOUNT,
            amount_threshold=DEFAULT_AMOUNT_THRESHOLD,
        )
        session.add(settings)
        session.flush()
        logger.info("Created default loyalty settings")
    return settings


def get_loyalty_settings() -> LoyaltySettingsRecord:
    with get_session() as session:
        return LoyaltySettingsRecord.model_validate(_get_or_create(session))


def update_loyalty_settings(payload: dict[str, Any]) -> LoyaltySettingsRecord:
    data = parse_payload(LoyaltySettingsUpdate, payload)

    with get_session() as session:
        settings = _get_or_create(session)
        settings.points_per_amount = data.points_per_amount
        settings.amount_threshold = data.amount_threshold
        settings.updated_at = utcnow()
        session.flush()
        record = LoyaltySettingsRecord.model_validate(settings)

    logger.info(
        f"Loyalty settings updated: {record.points_per_amount} points "
        f"per {record.amount_threshold} spent"
    )
    loyalty_settings_changed.send("loyalty_service")
    return record
