"""Site configuration service: a single record, merged on update."""

import logging
from typing import Any, Dict

import pydantic

from database import SITE_CONFIG, RecordStore
from errors import ValidationError
from schemas import SiteConfig

logger = logging.getLogger(__name__)

# sections whose keys are merged one level deep
NESTED_SECTIONS = ("hero", "consult", "footer")
REPLACED_LISTS = ("highlights",)


def merge_site_config(current: Dict[str, Any], payload: Dict[str, Any]) -> Dict[str, Any]:
    """
    Merge an update onto the stored site config.

    Top-level keys are replaced. `hero`, `consult` and `footer` keep any
    nested key the update leaves out. `highlights` is replaced only by a
    list; any other value leaves the stored list as it was.
    """
    merged = {**current, **payload}
    for section in NESTED_SECTIONS:
        update = payload.get(section)
        if update is None:
            update = {}
        if not isinstance(update, dict):
            raise ValidationError(f"'{section}' must be an object.")
        merged[section] = {**(current.get(section) or {}), **update}
    for section in REPLACED_LISTS:
        update = payload.get(section)
        merged[section] = update if isinstance(update, list) else current.get(section, [])
    return merged


class SiteConfigService:
    def __init__(self, store: RecordStore):
        self.store = store

    async def get(self) -> Dict[str, Any]:
        return await self.store.load(SITE_CONFIG)

    async def update(self, payload: Any) -> Dict[str, Any]:
        if payload is None:
            payload = {}
        if not isinstance(payload, dict):
            raise ValidationError("Site update must be a JSON object.")
        async with self.store.lock(SITE_CONFIG):
            current = await self.store.load(SITE_CONFIG)
            merged = merge_site_config(current, payload)
            try:
                SiteConfig.model_validate(merged)
            except pydantic.ValidationError:
                raise ValidationError("Site configuration is invalid.")
            await self.store.save(SITE_CONFIG, merged)
        logger.info("Updated site configuration (%s)", ", ".join(sorted(payload)) or "no changes")
        return merged
