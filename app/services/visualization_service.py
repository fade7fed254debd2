"""Fabric visualization pipeline.

Ordering within one request:
1. check the user's daily quota
2. load the fabric
3. fetch the sofa photo and fabric swatch
4. run the image model
5. store the result
6. consume one unit of quota

Quota is consumed only after the result is stored, so failed generations are
free. Generator and storage errors propagate to the caller unchanged.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from datetime import datetime

from app.adapters.image_gen.base import AbstractImageGenerator
from app.adapters.media.base import AbstractMediaStore
from app.core.logging import hash_identifier
from app.services.fabric_catalog import FabricCatalog
from app.services.prompts import build_fabric_replacement_prompt
from app.services.rate_limiter import RateLimiter

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GenerationOutcome:
    """Result of a visualization attempt.

    Attributes:
        status: 'ok', 'rate_limited' or 'fabric_not_found'.
        result_image_url: URL of the stored result when status is 'ok'.
        remaining_generations: Quota left after this attempt.
        reset_at: When the quota resets.
    """

    status: str
    remaining_generations: int
    reset_at: datetime
    result_image_url: str | None = None

    @property
    def ok(self) -> bool:
        return self.status == "ok"


class VisualizationService:
    """Orchestrates quota, catalog, image model and media storage."""

    def __init__(
        self,
        *,
        rate_limiter: RateLimiter,
        catalog: FabricCatalog,
        generator: AbstractImageGenerator,
        media: AbstractMediaStore,
    ) -> None:
        self.rate_limiter = rate_limiter
        self.catalog = catalog
        self.generator = generator
        self.media = media

    async def generate(self, user_id: str, sofa_image_url: str, fabric_id: str) -> GenerationOutcome:
        user_hash = hash_identifier(user_id)

        quota = await self.rate_limiter.check_rate_limit(user_id)
        if not quota.allowed:
            logger.warning(
                "generation.rate_limited",
                extra={"user_hash": user_hash, "limit": quota.limit},
            )
            return GenerationOutcome(
                status="rate_limited",
                remaining_generations=0,
                reset_at=quota.reset_at,
            )

        fabric = await self.catalog.get_fabric(fabric_id)
        if fabric is None:
            return GenerationOutcome(
                status="fabric_not_found",
                remaining_generations=quota.remaining,
                reset_at=quota.reset_at,
            )

        sofa_bytes, fabric_bytes = await asyncio.gather(
            self.media.fetch(sofa_image_url),
            self.media.fetch(fabric.image_url),
        )

        prompt = build_fabric_replacement_prompt(fabric)
        image_bytes = await self.generator.generate(prompt, [sofa_bytes, fabric_bytes])
        result_url = await self.media.upload_generated_image(image_bytes, user_id)

        await self.rate_limiter.increment_rate_limit(user_id)

        logger.info(
            "generation.completed",
            extra={
                "user_hash": user_hash,
                "fabric_id": fabric.id,
                "result_size_bytes": len(image_bytes),
            },
        )
        return GenerationOutcome(
            status="ok",
            result_image_url=result_url,
            remaining_generations=quota.remaining - 1,
            reset_at=quota.reset_at,
        )
