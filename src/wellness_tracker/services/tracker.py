"""Tracking controller owning the session state."""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field, replace
from datetime import UTC, date, datetime

from wellness_tracker.domain.errors import EmptyDataError, GenerationInProgressError
from wellness_tracker.domain.models import (
    DAYS_IN_WEEK,
    ActivityLevel,
    DailyFoodLog,
    DailyLog,
    Metrics,
    ProfileDraft,
    Summary,
    Tab,
    UserProfile,
    View,
    WeeklyLog,
    coerce_weight,
)
from wellness_tracker.domain.progress import ProgressView, progress_view
from wellness_tracker.services.export import ExportResult, ReportExporter
from wellness_tracker.services.prompts import build_report_prompt, has_logged_data
from wellness_tracker.services.reports import ReportService
from wellness_tracker.services.state import (
    METRICS_KEY,
    PROFILE_KEY,
    TAB_KEY,
    VIEW_KEY,
    WEEKLY_LOG_KEY,
    PersistentState,
)

NO_DATA_MESSAGE = "Por favor, introduce algunos datos antes de generar un resumen."

_DAY_FIELDS = frozenset({"weight", "mood", "activity_level"})
_FOOD_FIELDS = frozenset(DailyFoodLog.model_fields)
_METRICS_FIELDS = frozenset(Metrics.model_fields)
_PROFILE_FIELDS = frozenset(ProfileDraft.model_fields)

_logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(tz=UTC)


@dataclass(frozen=True)
class SessionState:
    """Immutable snapshot of everything the presentation layer renders."""

    view: View = View.PROFILE
    active_tab: Tab = Tab.LOG
    profile: UserProfile | None = None
    profile_draft: ProfileDraft = field(default_factory=ProfileDraft)
    week: WeeklyLog = field(default_factory=WeeklyLog.blank)
    metrics: Metrics = field(default_factory=Metrics)
    summary: Summary | None = None
    current_day: int = 0
    loading: bool = False
    week_epoch: int = 0


@dataclass
class TrackingController:
    """Applies user actions to the session and persists the result.

    Every mutation swaps ``snapshot`` for a new ``SessionState``, so a
    reader holding a snapshot never sees a half-applied change.
    """

    state: PersistentState
    reports: ReportService
    exporter: ReportExporter
    snapshot: SessionState = field(default_factory=SessionState)
    clock: Callable[[], datetime] = _utcnow

    @classmethod
    def restore(
        cls,
        state: PersistentState,
        reports: ReportService,
        exporter: ReportExporter,
    ) -> "TrackingController":
        """Create a controller from whatever the store holds.

        Without a saved profile the profile form is shown; otherwise the
        stored view is resumed, defaulting to the tracker.
        """
        profile = state.load(PROFILE_KEY, UserProfile | None, None)
        view = View.PROFILE
        if profile is not None:
            view = state.load(VIEW_KEY, View, View.TRACKER)
        snapshot = SessionState(
            view=view,
            active_tab=state.load(TAB_KEY, Tab, Tab.LOG),
            profile=profile,
            profile_draft=ProfileDraft.from_profile(profile),
            week=state.load(WEEKLY_LOG_KEY, WeeklyLog, WeeklyLog.blank()),
            metrics=state.load(METRICS_KEY, Metrics, Metrics()),
        )
        return cls(state=state, reports=reports, exporter=exporter, snapshot=snapshot)

    def update_profile_draft(self, **fields: object) -> ProfileDraft:
        """Merge form values into the profile draft."""
        _reject_unknown(fields, _PROFILE_FIELDS, "profile")
        merged = {**self.snapshot.profile_draft.model_dump(), **fields}
        draft = ProfileDraft.model_validate(merged)
        self._commit(profile_draft=draft)
        return draft

    def save_profile(self) -> UserProfile:
        """Validate the draft, store the profile and open the tracker."""
        profile = self.snapshot.profile_draft.validate_profile()
        self._commit(profile=profile, view=View.TRACKER)
        self.state.save(PROFILE_KEY, UserProfile | None, profile)
        self.state.save(VIEW_KEY, View, View.TRACKER)
        return profile

    def edit_profile(self) -> ProfileDraft:
        """Return to the profile form pre-filled with the saved profile."""
        draft = ProfileDraft.from_profile(self.snapshot.profile)
        self._commit(profile_draft=draft, view=View.PROFILE)
        self.state.save(VIEW_KEY, View, View.PROFILE)
        return draft

    def set_active_tab(self, tab: Tab | str) -> Tab:
        selected = Tab(tab)
        self._commit(active_tab=selected)
        self.state.save(TAB_KEY, Tab, selected)
        return selected

    def set_current_day(self, index: int) -> int:
        """Select a day of the week, clamped to the valid range."""
        clamped = max(0, min(index, DAYS_IN_WEEK - 1))
        self._commit(current_day=clamped)
        return clamped

    def next_day(self) -> int:
        return self.set_current_day(self.snapshot.current_day + 1)

    def previous_day(self) -> int:
        return self.set_current_day(self.snapshot.current_day - 1)

    def update_day(self, index: int, **patch: object) -> DailyLog:
        """Merge weight, mood or activity level into a day."""
        _reject_unknown(patch, _DAY_FIELDS, "day")
        changes: dict[str, object] = {}
        if "weight" in patch:
            changes["weight"] = coerce_weight(patch["weight"])
        if "mood" in patch:
            changes["mood"] = str(patch["mood"] or "")
        if "activity_level" in patch:
            changes["activity_level"] = ActivityLevel(patch["activity_level"])
        day = self.snapshot.week.day(index).model_copy(update=changes)
        self._replace_week(self.snapshot.week.replace_day(index, day))
        return day

    def update_food(self, index: int, **patch: object) -> DailyFoodLog:
        """Merge meal text into a day's food block."""
        _reject_unknown(patch, _FOOD_FIELDS, "food")
        current = self.snapshot.week.day(index)
        food = current.food.model_copy(
            update={name: str(value or "") for name, value in patch.items()}
        )
        day = current.model_copy(update={"food": food})
        self._replace_week(self.snapshot.week.replace_day(index, day))
        return food

    def update_metrics(self, **patch: object) -> Metrics:
        """Merge free-form notes into the metrics."""
        _reject_unknown(patch, _METRICS_FIELDS, "metrics")
        metrics = self.snapshot.metrics.model_copy(
            update={name: str(value or "") for name, value in patch.items()}
        )
        self._commit(metrics=metrics)
        self.state.save(METRICS_KEY, Metrics, metrics)
        return metrics

    def reset_week(self, confirm: Callable[[], bool]) -> bool:
        """Start a new week after explicit confirmation.

        Discards the week, the metrics and the summary. Results of a report
        request still in flight are dropped when they arrive.
        """
        if not confirm():
            return False
        self._commit(
            week=WeeklyLog.blank(),
            metrics=Metrics(),
            summary=None,
            current_day=0,
            week_epoch=self.snapshot.week_epoch + 1,
        )
        self.state.clear(WEEKLY_LOG_KEY)
        self.state.clear(METRICS_KEY)
        _logger.info("Week reset: epoch=%s", self.snapshot.week_epoch)
        return True

    def progress(self) -> ProgressView | None:
        """Return progress widget data, or None before a profile exists."""
        if self.snapshot.profile is None:
            return None
        return progress_view(self.snapshot.profile, self.snapshot.week)

    async def generate_summary(self) -> Summary | None:
        """Generate the weekly report for the current data.

        Returns None when the week was reset while the request was pending.
        """
        if self.snapshot.loading:
            raise GenerationInProgressError("A report is already being generated")
        epoch = self.snapshot.week_epoch
        self._commit(loading=True, summary=None)
        try:
            issued = self.snapshot
            if not has_logged_data(issued.week, issued.metrics):
                _logger.info("Skipping report generation: no data logged")
                raise EmptyDataError(NO_DATA_MESSAGE)
            prompt = build_report_prompt(issued.profile, issued.week, issued.metrics)
            content = await self.reports.generate(prompt)
        finally:
            self._commit(loading=False)

        if self.snapshot.week_epoch != epoch:
            _logger.info("Discarding report for a replaced week: epoch=%s", epoch)
            return None
        summary = Summary(content=content, week_epoch=epoch, generated_at=self.clock())
        self._commit(summary=summary)
        return summary

    def export_summary(self, today: date | None = None) -> ExportResult:
        """Export the current summary with profile and progress to a PDF."""
        profile = self.snapshot.profile
        summary = self.snapshot.summary
        if profile is None or summary is None:
            raise ValueError("A saved profile and a generated summary are required")
        return self.exporter.export(
            profile, self.snapshot.week, summary, today or date.today()
        )

    def _replace_week(self, week: WeeklyLog) -> None:
        self._commit(week=week)
        self.state.save(WEEKLY_LOG_KEY, WeeklyLog, week)

    def _commit(self, **changes: object) -> None:
        self.snapshot = replace(self.snapshot, **changes)


def _reject_unknown(
    patch: dict[str, object], allowed: frozenset[str], entity: str
) -> None:
    unknown = sorted(set(patch) - allowed)
    if unknown:
        raise ValueError(f"Unknown {entity} fields: {', '.join(unknown)}")
