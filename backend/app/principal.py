"""Caller context for authenticated requests."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Tuple


@dataclass(frozen=True)
class CallerContext:
    """
    Who is calling, resolved once per request.

    user_id and email come from the verified access token; the profile ids
    are looked up by account id. An account can be a coach, manage several
    ensembles, both, or neither.
    """

    user_id: str
    email: str
    coach_profile_id: Optional[str] = None
    ensemble_profile_ids: Tuple[str, ...] = field(default_factory=tuple)

    @property
    def is_coach(self) -> bool:
        return self.coach_profile_id is not None

    @property
    def has_ensembles(self) -> bool:
        return bool(self.ensemble_profile_ids)

    @property
    def default_ensemble_id(self) -> Optional[str]:
        return self.ensemble_profile_ids[0] if self.ensemble_profile_ids else None

    @property
    def normalized_email(self) -> str:
        return self.email.strip().lower()

    def owns_coach_profile(self, coach_profile_id: str) -> bool:
        return self.coach_profile_id is not None and self.coach_profile_id == coach_profile_id

    def owns_ensemble(self, ensemble_profile_id: Optional[str]) -> bool:
        return ensemble_profile_id is not None and ensemble_profile_id in self.ensemble_profile_ids
