"""Plan/quota state machine and content gating.

The transitions are pure reducers over an immutable `UserAccessState`
snapshot; `AccessSession` is the injectable holder that applies them,
persists the result through an optional `AccountRepository` and runs the
gating protocol for content reads.

Gating protocol (`AccessSession.gated_read`):
1. `check_and_reset_quota` (lazy daily rollover, no timers).
2. `can_access`; when false the read is skipped and the result carries
   `GateStatus.QUOTA_EXCEEDED`.
3. Run the loader. A successful read on the free plan is charged through
   `charge`, the single charging site: one unit per content id per calendar
   day, so re-reading the same fault (e.g. after a locale switch) never
   double-charges.

Account persistence errors propagate; there is no fallback for user state.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Generic, TypeVar

from core.domain.access import DEFAULT_DAILY_QUOTA, Plan, UserAccessState
from core.errors import AccessDeniedError
from core.interfaces.store import RecordStore, Row, Tables
from core.logging import get_logger

logger = get_logger(__name__)

V = TypeVar("V")

Clock = Callable[[], date]

# Key under which anonymous usage is persisted in the local user store.
GUEST_ACCOUNT_ID = "__local__"


def can_access(plan: Plan | str, quota_used: int, quota_limit: int) -> bool:
    return Plan(plan) is Plan.PRO or quota_used < quota_limit


def upgrade_to_pro(state: UserAccessState) -> UserAccessState:
    return state.model_copy(update={"plan": Plan.PRO})


def downgrade_to_free(state: UserAccessState) -> UserAccessState:
    """Back to the free plan. Today's usage is cleared even if already free."""

    return state.model_copy(update={"plan": Plan.FREE, "quota_used": 0, "charged_today": frozenset()})


def increment_quota(state: UserAccessState) -> UserAccessState:
    return state.model_copy(update={"quota_used": state.quota_used + 1})


def reset_daily_quota(state: UserAccessState, today: date) -> UserAccessState:
    return state.model_copy(
        update={"quota_used": 0, "last_reset_date": today, "charged_today": frozenset()}
    )


def check_and_reset_quota(state: UserAccessState, today: date) -> UserAccessState:
    if state.last_reset_date == today:
        return state
    return reset_daily_quota(state, today)


def charge_content(state: UserAccessState, content_id: str) -> UserAccessState:
    """Charge one unit for `content_id` unless it was already charged today."""

    if content_id in state.charged_today:
        return state
    charged = increment_quota(state)
    return charged.model_copy(update={"charged_today": state.charged_today | {content_id}})


def remaining_quota(state: UserAccessState) -> int | None:
    """Reads left today; `None` means unlimited (pro)."""

    if state.is_pro:
        return None
    return max(0, state.quota_limit - state.quota_used)


class AccountRepository:
    """Persisted access state per user (`user_access` table, no fallback)."""

    table = Tables.USER_ACCESS

    def __init__(self, store: RecordStore) -> None:
        self._store = store

    @staticmethod
    def _to_row(user_id: str, state: UserAccessState) -> Row:
        return {
            "user_id": user_id,
            "plan": state.plan.value,
            "quota_used": state.quota_used,
            "quota_limit": state.quota_limit,
            "last_reset_date": state.last_reset_date.isoformat(),
            "charged_today": sorted(state.charged_today),
        }

    @staticmethod
    def _from_row(row: Row) -> UserAccessState:
        quota_used = row.get("quota_used")
        quota_limit = row.get("quota_limit")
        return UserAccessState(
            plan=Plan(row.get("plan") or Plan.FREE.value),
            quota_used=0 if quota_used is None else int(quota_used),
            quota_limit=DEFAULT_DAILY_QUOTA if quota_limit is None else int(quota_limit),
            last_reset_date=date.fromisoformat(str(row["last_reset_date"])),
            charged_today=frozenset(row.get("charged_today") or ()),
        )

    async def load(self, user_id: str) -> UserAccessState | None:
        rows = await self._store.select(self.table, where={"user_id": user_id}, limit=1)
        return self._from_row(rows[0]) if rows else None

    async def save(self, user_id: str, state: UserAccessState) -> UserAccessState:
        row = self._to_row(user_id, state)
        updated = await self._store.update(self.table, row, where={"user_id": user_id})
        if not updated:
            await self._store.insert(self.table, row)
        return state


class GateStatus(str, Enum):
    GRANTED = "granted"
    QUOTA_EXCEEDED = "quota_exceeded"
    NOT_FOUND = "not_found"


@dataclass(frozen=True)
class GatedResult(Generic[V]):
    status: GateStatus
    value: V | None = None
    remaining: int | None = None

    @property
    def granted(self) -> bool:
        return self.status is GateStatus.GRANTED


class AccessSession:
    """Holds the access state of one user and persists it under `account_key`.

    `account_key` defaults to `user_id`. Anonymous sessions may still be
    persisted under `GUEST_ACCOUNT_ID`; they never count as authenticated.
    """

    def __init__(
        self,
        state: UserAccessState | None = None,
        *,
        user_id: str | None = None,
        accounts: AccountRepository | None = None,
        clock: Clock = date.today,
        account_key: str | None = None,
    ) -> None:
        self._state = state or UserAccessState(last_reset_date=clock())
        self._user_id = user_id
        self._account_key = account_key or user_id
        self._accounts = accounts
        self._clock = clock

    @classmethod
    async def open(
        cls,
        user_id: str | None,
        accounts: AccountRepository | None,
        *,
        quota_limit: int | None = None,
        clock: Clock = date.today,
        account_key: str | None = None,
    ) -> "AccessSession":
        """Load the stored state or start a fresh free-plan state.

        A `quota_limit` given here replaces the stored one, so a changed
        configured limit reaches existing accounts on their next session.
        `None` keeps whatever is stored.
        """

        key = account_key or user_id
        state = None
        if key and accounts is not None:
            state = await accounts.load(key)
        if state is None:
            state = UserAccessState(
                quota_limit=DEFAULT_DAILY_QUOTA if quota_limit is None else quota_limit,
                last_reset_date=clock(),
            )
        session = cls(state, user_id=user_id, accounts=accounts, clock=clock, account_key=key)
        if quota_limit is not None and state.quota_limit != quota_limit:
            await session._commit(state.model_copy(update={"quota_limit": quota_limit}))
        return session

    @property
    def state(self) -> UserAccessState:
        return self._state

    @property
    def user_id(self) -> str | None:
        return self._user_id

    @property
    def account_key(self) -> str | None:
        return self._account_key

    @property
    def is_authenticated(self) -> bool:
        return bool(self._user_id)

    async def _commit(self, new_state: UserAccessState) -> UserAccessState:
        if new_state == self._state:
            return self._state
        if self._accounts is not None and self._account_key:
            await self._accounts.save(self._account_key, new_state)
        self._state = new_state
        return new_state

    def can_access(self) -> bool:
        return can_access(self._state.plan, self._state.quota_used, self._state.quota_limit)

    def remaining(self) -> int | None:
        return remaining_quota(self._state)

    async def upgrade_to_pro(self) -> UserAccessState:
        state = await self._commit(upgrade_to_pro(self._state))
        logger.info("access.plan_changed", user_id=self._user_id, plan=state.plan.value)
        return state

    async def downgrade_to_free(self) -> UserAccessState:
        state = await self._commit(downgrade_to_free(self._state))
        logger.info("access.plan_changed", user_id=self._user_id, plan=state.plan.value)
        return state

    async def increment_quota(self) -> UserAccessState:
        return await self._commit(increment_quota(self._state))

    async def reset_daily_quota(self) -> UserAccessState:
        state = await self._commit(reset_daily_quota(self._state, self._clock()))
        logger.info("access.quota_reset", user_id=self._user_id, date=state.last_reset_date.isoformat())
        return state

    async def check_and_reset_quota(self) -> UserAccessState:
        previous = self._state.last_reset_date
        state = await self._commit(check_and_reset_quota(self._state, self._clock()))
        if state.last_reset_date != previous:
            logger.info("access.quota_reset", user_id=self._user_id, date=state.last_reset_date.isoformat())
        return state

    async def charge(self, content_id: str) -> bool:
        """Charge a successful free-plan read. Returns whether a unit was consumed."""

        if self._state.is_pro:
            return False
        before = self._state.quota_used
        state = await self._commit(charge_content(self._state, content_id))
        charged = state.quota_used != before
        if charged:
            logger.info(
                "access.quota_charged",
                user_id=self._user_id,
                content_id=content_id,
                quota_used=state.quota_used,
                quota_limit=state.quota_limit,
            )
        return charged

    async def gated_read(
        self,
        content_id: str,
        loader: Callable[[], Awaitable[V | None]],
    ) -> GatedResult[V]:
        await self.check_and_reset_quota()
        if not self.can_access():
            logger.info(
                "access.gate_denied",
                user_id=self._user_id,
                content_id=content_id,
                quota_used=self._state.quota_used,
                quota_limit=self._state.quota_limit,
            )
            return GatedResult(GateStatus.QUOTA_EXCEEDED, remaining=0)

        value = await loader()
        if value is None:
            return GatedResult(GateStatus.NOT_FOUND, remaining=self.remaining())

        await self.charge(content_id)
        return GatedResult(GateStatus.GRANTED, value=value, remaining=self.remaining())


def require_favorites_access(session: AccessSession) -> str:
    """Return the user id if favorites are allowed, else raise `AccessDeniedError`."""

    if not session.is_authenticated:
        raise AccessDeniedError("Favorites require a signed-in user", reason="unauthenticated")
    if not session.state.is_pro:
        raise AccessDeniedError("Favorites are a pro feature", reason="plan_free")
    return session.user_id  # type: ignore[return-value]
