"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from pathlib import Path

from supabase import create_client

from wellness_tracker.adapters.fpdf_canvas import FpdfCanvas
from wellness_tracker.adapters.json_file_state_store import JsonFileStateStore
from wellness_tracker.adapters.openai_report_client import OpenAIReportClient
from wellness_tracker.adapters.supabase_state_store import SupabaseStateStore
from wellness_tracker.app_logging import configure_logging
from wellness_tracker.config import Settings, parse_state_backend
from wellness_tracker.services.export import ReportExporter
from wellness_tracker.services.reports import ReportService
from wellness_tracker.services.state import PersistentState, StateStore
from wellness_tracker.services.tracker import TrackingController


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    state: PersistentState
    report_service: ReportService
    exporter: ReportExporter
    controller: TrackingController
    close_resources: Callable[[], Awaitable[None]]


def build_state_store(settings: Settings) -> StateStore:
    """Create the configured state store backend."""
    backend = parse_state_backend(settings.state_backend)
    if backend == "supabase":
        if not settings.supabase_url or not settings.supabase_service_key:
            raise ValueError("Supabase state backend requires URL and service key")
        client = create_client(settings.supabase_url, settings.supabase_service_key)
        return SupabaseStateStore(client, table=settings.supabase_state_table)
    return JsonFileStateStore.create(settings.state_dir)


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    configure_logging(resolved_settings.log_level.upper())
    state = PersistentState(build_state_store(resolved_settings))
    report_client = OpenAIReportClient.create(
        resolved_settings.openai_api_key,
        timeout_seconds=resolved_settings.openai_timeout_seconds,
    )
    report_service = ReportService(
        client=report_client,
        model=resolved_settings.openai_model,
        reasoning_effort=resolved_settings.openai_reasoning_effort,
        store=resolved_settings.openai_store,
    )
    exporter = ReportExporter(
        canvas_factory=FpdfCanvas.create,
        output_dir=Path(resolved_settings.report_dir),
    )
    controller = TrackingController.restore(state, report_service, exporter)

    async def close_resources() -> None:
        await report_client.close()

    return AppContainer(
        settings=resolved_settings,
        state=state,
        report_service=report_service,
        exporter=exporter,
        controller=controller,
        close_resources=close_resources,
    )
