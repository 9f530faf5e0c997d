"""Goal progress computation shared by the widget and the PDF export."""

from dataclasses import dataclass

from wellness_tracker.domain.models import UserProfile, WeeklyLog

GOAL_MET_TEXT = "¡Ya estás en tu peso meta!"


@dataclass(frozen=True)
class ProgressResult:
    """Percent complete toward the goal and its status sentence."""

    progress: float
    status: str


@dataclass(frozen=True)
class ProgressView:
    """Data needed to draw the progress widget."""

    initial: float
    current: float
    goal: float
    progress: float
    status: str


def current_weight(week: WeeklyLog, initial: float) -> float:
    """Return the latest recorded weight of the week, else ``initial``."""
    latest = week.latest_weight()
    return initial if latest is None else latest


def calculate_progress(initial: float, current: float, goal: float) -> ProgressResult:
    """Compute directional progress from ``initial`` toward ``goal``."""
    if initial == goal:
        return ProgressResult(progress=100.0, status=GOAL_MET_TEXT)

    gaining = goal > initial
    total_distance = abs(goal - initial)
    covered = current - initial if gaining else initial - current
    progress = max(0.0, min(covered / total_distance * 100, 100.0))

    remaining = abs(current - goal)
    moved = abs(current - initial)
    if gaining:
        if current >= goal:
            status = _goal_exceeded(remaining)
        elif current >= initial:
            status = _on_track("ganado", moved, remaining)
        else:
            status = _off_track("perdido", moved, remaining)
    elif current <= goal:
        status = _goal_exceeded(remaining)
    elif current <= initial:
        status = _on_track("perdido", moved, remaining)
    else:
        status = _off_track("ganado", moved, remaining)
    return ProgressResult(progress=progress, status=status)


def progress_view(profile: UserProfile, week: WeeklyLog) -> ProgressView:
    """Build the widget data for a profile and the current week."""
    current = current_weight(week, profile.initial_weight)
    result = calculate_progress(profile.initial_weight, current, profile.weight_goal)
    return ProgressView(
        initial=profile.initial_weight,
        current=current,
        goal=profile.weight_goal,
        progress=result.progress,
        status=result.status,
    )


def _goal_exceeded(over: float) -> str:
    return f"¡Felicidades! Has alcanzado y superado tu meta por {over:.2f} kg."


def _on_track(verb: str, moved: float, remaining: float) -> str:
    return f"Has {verb} {moved:.2f} kg. ¡Te faltan {remaining:.2f} kg para tu meta!"


def _off_track(verb: str, moved: float, remaining: float) -> str:
    return f"Has {verb} {moved:.2f} kg. Estás a {remaining:.2f} kg de tu meta."
