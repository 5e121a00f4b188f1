"""
Concierge Engine
================
Turns a chat transcript plus the caller's memory snapshot into search
criteria, ranked listings and a reply.

Request flow:
  1. Keep the most recent turns (18 by default).
  2. Empty transcript -> invitation reply, memory echoed back.
  3. Extract slots: only the latest user turn when memory is supplied,
     otherwise every user turn oldest-first, then merge into memory.
  4. "What should I do?" + known destination -> hobby suggestions
     (the catalog is not queried).
  5. Missing location / category / dates / guests -> follow-up prompt.
  6. Tiered catalog search -> ranking -> one page of results.

The engine keeps no state between calls.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Any, Dict, Iterable, List, Optional
import logging
import re

from concierge.core.config import Settings, settings as default_settings
from concierge.core.monitoring import track_performance
from concierge.services.catalog import CatalogCollaborator, UserProfileCollaborator
from concierge.services.memory import SessionMemory, criteria_met, merge, missing_fields
from concierge.services.ranking import ScoringWeights, paginate, project_result, rank_candidates
from concierge.services.replies import (
    INVITATION_REPLY,
    compose_hobby_reply,
    compose_missing_slots,
    compose_search_reply,
)
from concierge.services.slots import extract_slots
from concierge.services.tiers import QueryTier, TieredQueryPlanner

logger = logging.getLogger(__name__)

ROLES = ("user", "assistant")

HOBBY_TRIGGER_RE = re.compile(
    r"\bwhat (?:should|can|could|shall) (?:i|we) do\b|\bwhat to do\b"
)


@dataclass(frozen=True)
class ConversationTurn:
    role: str
    text: str


def recent_turns(messages: Optional[Iterable[Any]], window: int) -> List[ConversationTurn]:
    """Last `window` messages as turns; unknown roles and blank text are dropped."""
    turns: List[ConversationTurn] = []
    for message in list(messages or [])[-window:]:
        if isinstance(message, ConversationTurn):
            role, text = message.role, message.text
        elif isinstance(message, dict):
            role, text = message.get("role"), message.get("content")
        else:
            role, text = getattr(message, "role", None), getattr(message, "content", None)
        if role in ROLES and isinstance(text, str) and text.strip():
            turns.append(ConversationTurn(role, text.strip()))
    return turns


@dataclass
class ConciergeResult:
    reply: str
    memory: SessionMemory
    recommendations: List[Dict[str, Any]] = field(default_factory=list)
    missing_fields: List[str] = field(default_factory=list)
    has_more: bool = False
    tier: Optional[QueryTier] = None
    total_matched: int = 0

    @property
    def criteria_met(self) -> bool:
        return not self.missing_fields

    def to_payload(self, include_reply: bool = True) -> Dict[str, Any]:
        payload: Dict[str, Any] = {}
        if include_reply:
            payload["reply"] = self.reply
        payload.update({
            "recommendations": self.recommendations,
            "criteriaMet": self.criteria_met,
            "missingFields": self.missing_fields,
            "memory": self.memory.to_payload(),
            "hasMore": self.has_more,
            "tier": self.tier.value if self.tier else None,
            "totalMatched": self.total_matched,
        })
        return payload


class ConciergeEngine:
    """Stateless per-request orchestration over the catalog collaborators."""

    def __init__(
        self,
        catalog: CatalogCollaborator,
        profiles: Optional[UserProfileCollaborator] = None,
        config: Settings = default_settings,
        weights: Optional[ScoringWeights] = None,
        today: Optional[date] = None,
    ):
        self.catalog = catalog
        self.profiles = profiles
        self.config = config
        self.weights = weights or ScoringWeights.from_settings(config)
        self.planner = TieredQueryPlanner(candidate_cap=config.candidate_cap)
        self.today = today

    # ------------------------------------------------------------------
    # Slot resolution
    # ------------------------------------------------------------------

    def _extract_into(self, memory: SessionMemory, turns: List[ConversationTurn], index: int) -> SessionMemory:
        previous = turns[index - 1] if index > 0 else None
        previous_assistant = previous.text if previous and previous.role == "assistant" else None
        extracted = extract_slots(
            turns[index].text,
            previous_assistant,
            today=self.today,
            keyword_cap=self.config.keyword_cap,
        )
        return merge(memory, extracted, keyword_cap=self.config.keyword_cap)

    def resolve(self, turns: List[ConversationTurn], memory: Optional[SessionMemory]) -> SessionMemory:
        user_indexes = [i for i, turn in enumerate(turns) if turn.role == "user"]
        if not user_indexes:
            return memory or SessionMemory()
        if memory is not None:
            return self._extract_into(memory, turns, user_indexes[-1])

        # No snapshot from the client: rebuild it from the transcript
        resolved = SessionMemory()
        for index in user_indexes:
            resolved = self._extract_into(resolved, turns, index)
        return resolved

    # ------------------------------------------------------------------
    # Entry point
    # ------------------------------------------------------------------

    @track_performance("concierge.respond")
    def respond(
        self,
        messages: Optional[Iterable[Any]],
        memory: Any = None,
        offset: Any = 0,
        limit: Any = None,
        user_id: Optional[str] = None,
    ) -> ConciergeResult:
        snapshot = memory
        if memory is not None and not isinstance(memory, SessionMemory):
            snapshot = SessionMemory.from_payload(memory, keyword_cap=self.config.keyword_cap)
        turns = recent_turns(messages, self.config.transcript_window)

        if not any(turn.role == "user" for turn in turns):
            echoed = snapshot or SessionMemory()
            return ConciergeResult(INVITATION_REPLY, echoed, missing_fields=missing_fields(echoed))

        resolved = self.resolve(turns, snapshot)
        missing = missing_fields(resolved)
        latest_user_text = next(turn.text for turn in reversed(turns) if turn.role == "user")

        if resolved.location and HOBBY_TRIGGER_RE.search(latest_user_text.lower()):
            interests = None
            if self.profiles is not None and user_id:
                interests = self.profiles.get_interests(user_id)
            logger.info(f"Hobby suggestions for {resolved.location!r} ({len(interests or [])} interests)")
            return ConciergeResult(
                compose_hobby_reply(resolved.location, interests),
                resolved,
                missing_fields=missing,
            )

        if not criteria_met(resolved):
            logger.info(f"Criteria incomplete, missing: {missing}")
            return ConciergeResult(compose_missing_slots(resolved), resolved, missing_fields=missing)

        outcome = self.planner.execute(self.catalog, resolved)
        ranked = rank_candidates(outcome.candidates, resolved, self.weights)
        page = paginate(
            ranked,
            offset,
            limit,
            default_limit=self.config.default_page_size,
            max_limit=self.config.max_page_size,
        )
        recommendations = [
            project_result(result, self.config.description_max_chars) for result in page.items
        ]
        logger.info(
            f"Search complete: tier={outcome.tier.value if outcome.tier else None} "
            f"returned {len(recommendations)}/{page.total} (offset {page.offset})"
        )
        return ConciergeResult(
            compose_search_reply(outcome.tier, page.total, resolved),
            resolved,
            recommendations=recommendations,
            missing_fields=[],
            has_more=page.has_more,
            tier=outcome.tier,
            total_matched=page.total,
        )
