"""Debounced recomputation of a pricing session"""

import asyncio
import dataclasses
import logging
from datetime import date
from enum import Enum
from typing import Callable, Dict, Iterable, List, Optional, Protocol, Sequence, Set
from credit_quoter.domain.catalog import ALLOWED_TERMS
from credit_quoter.domain.models import Lender, PricingSnapshot
from credit_quoter.domain.normalizer import RawLoanInput, RawOverride
from credit_quoter.domain.pricing import price

logger = logging.getLogger(__name__)

DEFAULT_DEBOUNCE_SECONDS = 0.5


class SchedulerState(str, Enum):
    IDLE = "idle"
    PENDING = "pending"
    COMPUTING = "computing"


class TimerHandle(Protocol):
    def cancel(self) -> None: ...


TimerFactory = Callable[[float, Callable[[], None]], TimerHandle]


def asyncio_timer(delay: float, callback: Callable[[], None]) -> TimerHandle:
    """Schedule callback on the running event loop; must be called from within it"""
    return asyncio.get_running_loop().call_later(delay, callback)


class RecomputeScheduler:
    """
    Owns the raw input of one pricing session and recomputes it after edits pause.

    State machine: IDLE -> PENDING -> COMPUTING -> IDLE.
    - Every mutation bumps the generation, cancels the pending timer and starts
      a new one (last write wins)
    - Timer expiry calls recompute(); offers are aggregated only once
      request_offers() has been called
    - A computation whose generation is no longer current when it finishes is
      discarded, so a stale result is never committed
    """

    def __init__(
        self,
        lenders: Sequence[Lender],
        raw_loan: RawLoanInput | None = None,
        delay_seconds: float = DEFAULT_DEBOUNCE_SECONDS,
        timer_factory: TimerFactory = asyncio_timer,
        on_commit: Callable[[PricingSnapshot], None] | None = None,
        pricer: Callable[..., PricingSnapshot] = price,
        allowed_terms: Iterable[int] = ALLOWED_TERMS,
        start_date: date | None = None,
    ):
        self.lenders: List[Lender] = list(lenders)
        self.raw_loan = raw_loan or RawLoanInput()
        self.raw_overrides: Dict[int, RawOverride] = {}
        self.selected_ids: Optional[Set[int]] = None
        self.offers_requested = False
        self.delay_seconds = delay_seconds
        self.allowed_terms = tuple(allowed_terms)
        self.start_date = start_date

        self.state = SchedulerState.IDLE
        self.snapshot: Optional[PricingSnapshot] = None
        self.commit_count = 0
        self.superseded_count = 0

        self._timer_factory = timer_factory
        self._on_commit = on_commit
        self._pricer = pricer
        self._generation = 0
        self._timer: Optional[TimerHandle] = None

    @property
    def generation(self) -> int:
        return self._generation

    # -- Mutations --

    def update_request(self, **changes) -> None:
        """
        Change loan fields. Editing only the down payment amount makes the
        amount authoritative; editing the percentage makes the percentage win.
        """
        if "last_edited" not in changes:
            if "down_payment_amount" in changes and "down_payment_percentage" not in changes:
                changes["last_edited"] = "amount"
            elif "down_payment_percentage" in changes:
                changes["last_edited"] = "percentage"
        self.raw_loan = dataclasses.replace(self.raw_loan, **changes)
        self._mutated()

    def set_override(self, lender_id: int, override: RawOverride) -> None:
        self.raw_overrides = {**self.raw_overrides, lender_id: override}
        self._mutated()

    def clear_override(self, lender_id: int) -> None:
        self.raw_overrides = {k: v for k, v in self.raw_overrides.items() if k != lender_id}
        self._mutated()

    def select_lenders(self, lender_ids: Iterable[int] | None) -> None:
        """Restrict aggregation to a subset; None compares every lender"""
        self.selected_ids = set(lender_ids) if lender_ids is not None else None
        self._mutated()

    def request_offers(self) -> None:
        """Ask for aggregation from the next recomputation on"""
        self.offers_requested = True
        self._mutated()

    # -- Computation --

    def recompute(self) -> Optional[PricingSnapshot]:
        """Run the pipeline for the current input; returns None when superseded"""
        self._cancel_timer()
        generation = self._generation
        self.state = SchedulerState.COMPUTING

        try:
            snapshot = self._pricer(
                self.raw_loan,
                self.lenders,
                self.raw_overrides,
                include_offers=self.offers_requested,
                selected_ids=self.selected_ids,
                start_date=self.start_date,
                allowed_terms=self.allowed_terms,
                generation=generation,
            )
        finally:
            # A mutation during pricing already moved the state to PENDING
            if self.state == SchedulerState.COMPUTING:
                self.state = SchedulerState.IDLE

        if generation != self._generation:
            self.superseded_count += 1
            logger.debug(
                "Discarded stale recomputation",
                extra={"generation": generation, "current_generation": self._generation},
            )
            return None

        self.snapshot = snapshot
        self.commit_count += 1
        self.state = SchedulerState.IDLE
        logger.debug(
            "Recomputation committed",
            extra={
                "generation": generation,
                "valid": snapshot.validation.ok,
                "offer_count": len(snapshot.offers),
            },
        )

        if self._on_commit is not None:
            self._on_commit(snapshot)
        return snapshot

    def flush(self) -> Optional[PricingSnapshot]:
        """Skip the remaining delay and recompute now"""
        return self.recompute()

    def cancel(self) -> None:
        """Drop any pending recomputation (e.g. when the session view closes)"""
        self._cancel_timer()
        self._generation += 1
        self.state = SchedulerState.IDLE

    def _mutated(self) -> None:
        self._generation += 1
        self._cancel_timer()
        self.state = SchedulerState.PENDING
        self._timer = self._timer_factory(self.delay_seconds, self.recompute)

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
