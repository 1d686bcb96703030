import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional, Sequence

import pandas as pd
from pydantic import BaseModel, Field, TypeAdapter, ValidationError

from rentalroi.schema import Assumptions
from rentalroi.engine import compute_projections
from rentalroi.metrics import headline_metrics
from rentalroi.config import config
from rentalroi.logging_utils import get_logger

log = get_logger(__name__)

MAX_COMPARISONS = 5


def dump_assumptions(a: Assumptions) -> str:
    return a.model_dump_json(indent=2)


def load_assumptions(text: str) -> Assumptions:
    """Parse and validate a serialized record. Raises pydantic.ValidationError on bad input."""
    return Assumptions.model_validate_json(text)


def _now() -> datetime:
    return datetime.now(timezone.utc)


class Draft(BaseModel):
    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    name: str
    data: Assumptions
    created_at: datetime = Field(default_factory=_now)
    updated_at: datetime = Field(default_factory=_now)


_DRAFT_LIST = TypeAdapter(List[Draft])


class DraftStore:
    """Named assumption drafts kept in a single JSON file. Projections are never stored."""

    def __init__(self, path: Optional[Path] = None):
        self.path = Path(path or config.DRAFTS_FILE)

    def _read(self) -> List[Draft]:
        if not self.path.exists():
            return []
        try:
            return _DRAFT_LIST.validate_json(self.path.read_text(encoding="utf-8"))
        except (ValidationError, ValueError) as err:
            log.warning("draft store unreadable, starting empty", extra={"context": {"path": str(self.path), "error": str(err)}})
            return []

    def _write(self, drafts: List[Draft]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_bytes(_DRAFT_LIST.dump_json(drafts, indent=2))

    def list(self) -> List[Draft]:
        return self._read()

    def get(self, draft_id: str) -> Optional[Draft]:
        return next((d for d in self._read() if d.id == draft_id), None)

    def save(self, name: str, a: Assumptions, draft_id: Optional[str] = None) -> Draft:
        """Update the draft with ``draft_id`` if it exists, otherwise create a new one."""
        drafts = self._read()
        for i, d in enumerate(drafts):
            if draft_id is not None and d.id == draft_id:
                saved = d.model_copy(update={"name": name, "data": a, "updated_at": _now()})
                drafts[i] = saved
                break
        else:
            saved = Draft(name=name, data=a)
            drafts.append(saved)

        self._write(drafts)
        log.info("draft saved", extra={"context": {"id": saved.id, "name": name}})
        return saved

    def delete(self, draft_id: str) -> bool:
        drafts = self._read()
        kept = [d for d in drafts if d.id != draft_id]
        if len(kept) == len(drafts):
            return False
        self._write(kept)
        log.info("draft deleted", extra={"context": {"id": draft_id}})
        return True


def compare_drafts(
    store: DraftStore,
    draft_ids: Sequence[str],
    placeholders: Optional[Sequence[float]] = None,
) -> pd.DataFrame:
    """Side-by-side headline metrics for up to MAX_COMPARISONS saved drafts, one row per draft.

    Projections are recomputed from each draft's assumptions on every call.
    """
    if len(draft_ids) > MAX_COMPARISONS:
        raise ValueError(f"at most {MAX_COMPARISONS} drafts can be compared, got {len(draft_ids)}")

    drafts = {d.id: d for d in store.list()}
    rows = []
    for draft_id in draft_ids:
        draft = drafts.get(draft_id)
        if draft is None:
            raise KeyError(draft_id)
        a = draft.data
        records = compute_projections(a, placeholders)
        headline = headline_metrics(records, a)
        rows.append({
            "id": draft.id,
            "name": draft.name,
            "initial_investment": a.initial_investment,
            "y1_occupancy": a.y1_occupancy,
            "y1_adr": a.y1_adr,
            "avg_roi": headline["avg_net_yield"],
            "total_revenue": headline["total_revenue"],
            "total_net_profit": headline["total_net_profit"],
            "avg_gop_margin": headline["avg_gop_margin"],
            "payback_years": headline["payback_years"],
        })

    log.info("drafts compared", extra={"context": {"ids": list(draft_ids)}})
    return pd.DataFrame(rows, columns=[
        "id", "name", "initial_investment", "y1_occupancy", "y1_adr",
        "avg_roi", "total_revenue", "total_net_profit", "avg_gop_margin", "payback_years",
    ])
