"""
Build configuration.

The only runtime choice is which relations to compute; the worker count
of the parallel pass can also be set, or taken from OCDG_MAX_WORKERS.
"""

from __future__ import annotations

import logging
import os
from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator

from ocdg.core.models import Relation, RelationTier


logger = logging.getLogger(__name__)

MAX_WORKERS_ENV = "OCDG_MAX_WORKERS"


def _default_max_workers() -> Optional[int]:
    value = os.getenv(MAX_WORKERS_ENV)
    if value is None or not value.strip():
        return None
    return int(value)


class BuildConfig(BaseModel):
    """
    Settings for one graph construction.

    Relations may be given as members or names ("COBIRTH", "cobirth").
    Duplicates are dropped, first occurrence wins. Unknown names are
    logged and ignored; they simply contribute no edges.
    """

    relations: list[Relation] = Field(
        default_factory=lambda: list(Relation),
        description="Relations to compute"
    )
    max_workers: Optional[int] = Field(
        default_factory=_default_max_workers,
        ge=1,
        validate_default=True,
        description="Worker threads for the per-object pass (None = executor default)"
    )

    model_config = {"frozen": True, "extra": "forbid"}

    @field_validator("relations", mode="before")
    @classmethod
    def validate_relations(cls, v: Any) -> list[Relation]:
        """Parse names, dropping duplicates and unknown names."""
        if v is None:
            return list(Relation)
        if isinstance(v, (str, Relation)):
            v = [v]
        parsed: list[Relation] = []
        for item in v:
            try:
                rel = Relation.parse(item)
            except ValueError:
                logger.warning(f"Ignoring unknown relation {item!r}")
                continue
            if rel not in parsed:
                parsed.append(rel)
        return parsed

    def resolved_relations(self) -> frozenset[Relation]:
        """
        Relations that will actually be evaluated.

        INSTANCE and WHOLE relations are only evaluated between objects
        already linked by INTERACTS, so selecting any of them pulls
        INTERACTS in.
        """
        selected = set(self.relations)
        if any(rel.tier != RelationTier.PRIMITIVE for rel in selected):
            selected.add(Relation.INTERACTS)
        return frozenset(selected)

    def relations_for(self, tier: RelationTier) -> list[Relation]:
        """Resolved relations of one tier, in stable order."""
        resolved = self.resolved_relations()
        return [rel for rel in Relation.of_tier(tier) if rel in resolved]
