"""Booth session state machine: landing, lead form, spin, success."""

from __future__ import annotations

import asyncio
import random
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional

from core import SessionStep, SpinDefaults, get_logger
from core.exceptions import (
    AlreadyCommittedError,
    DatabaseError,
    DuplicateKeyConflictError,
    InvalidTransitionError,
    SpinAlreadyStartedError,
)
from database.models import ContactDetails, SpinOutcome
from services.angle_mapper import random_full_rotations, target_rotation
from services.participant_ledger import ParticipantLedger, Registration
from services.reward_selector import RandomSource, select_reward
from services.rewards import Reward, RewardTable
from utils.performance import PerformanceMonitor
from utils.validators import LeadData, split_phone

logger = get_logger(__name__)
monitor = PerformanceMonitor()

# Linear flow; ALREADY_PLAYED is the terminal branch out of FORM
TRANSITIONS: Dict[SessionStep, frozenset] = {
    SessionStep.LANDING: frozenset({SessionStep.FORM}),
    SessionStep.FORM: frozenset({SessionStep.SPIN, SessionStep.ALREADY_PLAYED}),
    SessionStep.SPIN: frozenset({SessionStep.SUCCESS}),
    SessionStep.SUCCESS: frozenset(),
    SessionStep.ALREADY_PLAYED: frozenset(),
}

EntryAction = Callable[["SessionFlow"], None]


@dataclass(frozen=True, slots=True)
class LeadResult:
    step: SessionStep
    is_new_participant: bool
    prior_reward_name: Optional[str] = None

    @property
    def already_played(self) -> bool:
        return self.step is SessionStep.ALREADY_PLAYED


@dataclass(frozen=True, slots=True)
class SpinPlan:
    reward: Reward
    reward_index: int
    full_rotations: int
    rotation: float
    duration_seconds: float


@dataclass(frozen=True, slots=True)
class SpinResult:
    reward_name: str
    participant_name: str
    recorded: bool
    outcome: Optional[SpinOutcome] = None

    @property
    def first_name(self) -> str:
        return self.participant_name.split(" ")[0]


class SessionFlow:
    """One visitor's pass through the booth.

    The session state is the single source of truth: a spin has started once
    ``spin_plan`` is set and the reward is fixed once ``reward`` is set.
    Neither is ever replaced.

    Args:
        ledger: Participant ledger used for registration and commit
        table: Reward table the wheel is drawn from
        reward_rng: Source of uniform floats in ``[0, 1)`` for reward selection
        turns_rng: ``random.randint``-like source for cosmetic whole turns
        spin_duration: Seconds the wheel animation runs before the outcome is revealed
        min_full_rotations: Fewest whole turns added to the landing angle
        max_full_rotations: Most whole turns added to the landing angle
    """

    def __init__(
        self,
        ledger: ParticipantLedger,
        table: RewardTable,
        reward_rng: RandomSource = random.random,
        turns_rng: Callable[[int, int], int] = random.randint,
        spin_duration: float = SpinDefaults.DURATION_SECONDS,
        min_full_rotations: int = SpinDefaults.MIN_FULL_ROTATIONS,
        max_full_rotations: int = SpinDefaults.MAX_FULL_ROTATIONS,
    ) -> None:
        self.ledger = ledger
        self.table = table
        self.reward_rng = reward_rng
        self.turns_rng = turns_rng
        self.spin_duration = spin_duration
        self.min_full_rotations = min_full_rotations
        self.max_full_rotations = max_full_rotations

        self.state = SessionStep.LANDING
        self.participant_id: Optional[int] = None
        self.participant_name: Optional[str] = None
        self.reward: Optional[Reward] = None
        self.spin_plan: Optional[SpinPlan] = None
        self.result: Optional[SpinResult] = None
        self.prior_reward_name: Optional[str] = None

        self._lock = asyncio.Lock()
        self._animation_done: Optional[asyncio.Event] = None
        self._animation_timer: Optional[asyncio.TimerHandle] = None
        self._commit_task: Optional[asyncio.Task] = None
        self._entry_actions: Dict[SessionStep, List[EntryAction]] = {}

    @property
    def has_spun(self) -> bool:
        return self.spin_plan is not None

    @property
    def commit_task(self) -> Optional[asyncio.Task]:
        """Server-side commit started with the spin, or None before the spin."""
        return self._commit_task

    def on_enter(self, step: SessionStep, action: EntryAction) -> None:
        """Register an action run once when the session enters ``step``."""
        self._entry_actions.setdefault(step, []).append(action)

    def _require(self, step: SessionStep) -> None:
        if self.state is not step:
            raise InvalidTransitionError(
                f"Session is at {self.state.value}, expected {step.value}"
            )

    def _transition(self, target: SessionStep) -> None:
        if target not in TRANSITIONS[self.state]:
            raise InvalidTransitionError(f"Cannot move from {self.state.value} to {target.value}")

        logger.debug(f"Session {self.state.value} -> {target.value}")
        self.state = target

        for action in self._entry_actions.get(target, ()):
            try:
                action(self)
            except Exception as e:
                logger.error(f"Entry action for {target.value} failed: {e}", exc_info=True)

    def open_form(self) -> None:
        self._transition(SessionStep.FORM)

    async def submit_lead(self, lead: LeadData) -> LeadResult:
        """Register or resume the visitor behind a validated lead.

        A contact that already has an outcome ends the session in
        ``ALREADY_PLAYED``; everyone else moves to ``SPIN`` with the reward
        drawn on the way in.

        Raises:
            InvalidTransitionError: If the session is not at the form
            StoreUnavailableError: If the ledger cannot be read; the session stays at the form
        """
        async with self._lock:
            self._require(SessionStep.FORM)
            registration = await self._register(lead)

            if registration.already_played:
                self.prior_reward_name = registration.existing_outcome.reward_name
                monitor.record_already_played()
                self._transition(SessionStep.ALREADY_PLAYED)
                return LeadResult(
                    step=self.state,
                    is_new_participant=False,
                    prior_reward_name=self.prior_reward_name,
                )

            monitor.record_registration(registration.is_new_participant)
            self.participant_id = registration.participant_id
            self.participant_name = lead.full_name
            if self.reward is None:
                self.reward = select_reward(self.table, self.reward_rng)
            self._transition(SessionStep.SPIN)
            return LeadResult(step=self.state, is_new_participant=registration.is_new_participant)

    async def _register(self, lead: LeadData) -> Registration:
        phone_country, phone_number = split_phone(lead.phone)
        details = ContactDetails(
            phone_country=phone_country,
            phone_number=phone_number,
            organization_name=lead.organization_name,
        )

        try:
            return await self.ledger.register_or_resume(lead.work_email, lead.full_name, details)
        except DuplicateKeyConflictError as e:
            # Lost the creation race: the winner's record is there now
            logger.warning(f"Registration race for {e.contact_key}, re-resolving")
            return await self.ledger.register_or_resume(lead.work_email, lead.full_name, details)

    async def start_spin(self) -> SpinPlan:
        """Fix the wheel target for the already drawn reward and start the animation.

        The outcome is committed by the server once the animation timer
        fires, whether or not the client ever asks for the result.

        Raises:
            SpinAlreadyStartedError: If this session has already spun
            InvalidTransitionError: If the session is not at the spin step
        """
        async with self._lock:
            if self.spin_plan is not None:
                raise SpinAlreadyStartedError("The wheel has already been spun for this session")
            self._require(SessionStep.SPIN)

            index = self.table.index_of(self.reward.name)
            turns = random_full_rotations(self.turns_rng, self.min_full_rotations, self.max_full_rotations)
            self.spin_plan = SpinPlan(
                reward=self.reward,
                reward_index=index,
                full_rotations=turns,
                rotation=target_rotation(self.table, self.reward, index, turns),
                duration_seconds=self.spin_duration,
            )

            self._animation_done = asyncio.Event()
            loop = asyncio.get_running_loop()
            self._animation_timer = loop.call_later(self.spin_duration, self._animation_done.set)
            self._commit_task = loop.create_task(self._commit_after_animation())

            monitor.record_spin(self.reward.name)
            logger.info(
                f"Participant {self.participant_id} spinning for {self.reward.name}",
                extra={"participant_id": self.participant_id}
            )
            return self.spin_plan

    async def _commit_after_animation(self) -> SpinResult:
        await self._animation_done.wait()

        reward_name = self.reward.name
        outcome = None
        recorded = True
        try:
            outcome = await self.ledger.commit_outcome(self.participant_id, self.reward)
        except AlreadyCommittedError as e:
            # Another tab finished first; report what the ledger holds
            outcome = e.existing
            if outcome is not None:
                reward_name = outcome.reward_name
            else:
                recorded = False
        except DatabaseError as e:
            logger.warning(
                f"Could not record {reward_name} for participant {self.participant_id}: {e}",
                extra={"participant_id": self.participant_id}
            )
            monitor.record_commit_failure()
            recorded = False

        self.result = SpinResult(
            reward_name=reward_name,
            participant_name=self.participant_name,
            recorded=recorded,
            outcome=outcome,
        )
        self._transition(SessionStep.SUCCESS)
        return self.result

    async def finish_spin(self) -> SpinResult:
        """Wait for the server-side commit of the started spin and return its result.

        The session reaches ``SUCCESS`` even when the outcome cannot be
        recorded; the result then carries ``recorded=False``. Calling again
        after success returns the same result.

        Raises:
            InvalidTransitionError: If no spin has been started
        """
        if self.state is SessionStep.SUCCESS:
            return self.result
        self._require(SessionStep.SPIN)
        if self._commit_task is None:
            raise InvalidTransitionError("The wheel has not been spun yet")

        # A caller that gives up waiting must not cancel the commit
        return await asyncio.shield(self._commit_task)

    async def run_spin(self) -> SpinResult:
        await self.start_spin()
        return await self.finish_spin()

    def snapshot(self) -> Dict[str, Any]:
        """Presentation view of the session."""
        data: Dict[str, Any] = {"step": self.state.value}

        if self.state is SessionStep.ALREADY_PLAYED:
            data["already_played"] = True
            data["prior_reward"] = self.prior_reward_name
        if self.spin_plan is not None:
            data["spin"] = {
                "reward": self.spin_plan.reward.name,
                "reward_index": self.spin_plan.reward_index,
                "color": self.spin_plan.reward.color,
                "rotation": self.spin_plan.rotation,
                "duration_ms": int(self.spin_plan.duration_seconds * 1000),
            }
        if self.result is not None:
            data["result"] = {
                "reward": self.result.reward_name,
                "name": self.result.participant_name,
                "first_name": self.result.first_name,
                "recorded": self.result.recorded,
            }
        return data
