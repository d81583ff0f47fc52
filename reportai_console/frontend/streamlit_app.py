"""
Streamlit console: Report Manager and Generate Report pages.
"""

import sys
from pathlib import Path
from typing import Any, Dict, List

import pandas as pd
import streamlit as st
import streamlit.components.v1 as components

PROJECT_ROOT = Path(__file__).resolve().parents[2]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from reportai_console.backend.uploads import UploadPreviewer, UploadValidator
from reportai_console.config import CONFIG, PAGE_SIZE_OPTIONS, LLMProvider, configure_logging
from reportai_console.controllers.generation_controller import GenerationController
from reportai_console.controllers.reports_controller import ReportsController
from reportai_console.core.api_client import api
from reportai_console.core.errors import GenerationError, ReportConsoleError, ValidationError
from reportai_console.core.models import GenerateReportRequest, Report, UploadedFile
from reportai_console.utils.templates import template_preview
from reportai_console.utils.validation import require_email, require_positive_id, require_text

PAGES = ["Report Manager", "Generate Report"]
PROVIDER_OPTIONS = ["", *[provider.value for provider in LLMProvider]]

st.set_page_config(
    page_title="ReportAI Console",
    page_icon="📄",
    layout="wide",
    initial_sidebar_state="expanded",
)


def _initialize_state() -> None:
    if "reports_controller" not in st.session_state:
        st.session_state.reports_controller = ReportsController(client=api)
    if "generation_controller" not in st.session_state:
        st.session_state.generation_controller = GenerationController(client=api)
    st.session_state.setdefault("filter_id", "")
    st.session_state.setdefault("filter_email", "")


def _reports_frame(reports: List[Report]) -> pd.DataFrame:
    rows = [
        {
            "id": report.id,
            "user_mail": report.user_mail,
            "active": report.active,
            "template": template_preview(report.template),
            "created": report.create_at,
            "updated": report.update_at,
        }
        for report in reports
    ]
    return pd.DataFrame(rows, columns=["id", "user_mail", "active", "template", "created", "updated"])


def _render_filters(controller: ReportsController) -> None:
    st.markdown("### Filters")
    with st.form("filter_form"):
        col_id, col_mail = st.columns(2)
        with col_id:
            filter_id = st.text_input("Report ID", value=st.session_state.filter_id, placeholder="e.g. 42")
        with col_mail:
            filter_email = st.text_input("User email", value=st.session_state.filter_email)
        search_col, clear_col, _ = st.columns([1, 1, 6])
        with search_col:
            search = st.form_submit_button("Search", type="primary")
        with clear_col:
            clear = st.form_submit_button("Clear")

    if search:
        st.session_state.filter_id = filter_id.strip()
        st.session_state.filter_email = filter_email.strip()
        if st.session_state.filter_id:
            try:
                require_positive_id(st.session_state.filter_id, "Report ID")
            except ValidationError as e:
                st.error(str(e))
                return
        controller.search(st.session_state.filter_id, user_mail=st.session_state.filter_email)
    elif clear:
        st.session_state.filter_id = ""
        st.session_state.filter_email = ""
        controller.fetch_reports(page=1, page_size=controller.pagination.page_size)

    active_filter = controller.active_filter
    if active_filter:
        parts = [f"id {active_filter['id']}"]
        if active_filter.get("user_mail"):
            parts.append(f"email {active_filter['user_mail']}")
        st.info(f"Filtering by {', '.join(parts)}")


def _render_create_form(controller: ReportsController) -> None:
    with st.expander("➕ New report", expanded=False):
        with st.form("create_form", clear_on_submit=False):
            user_mail = st.text_input("Owner email")
            template = st.text_area("Template (HTML)", height=220)
            submitted = st.form_submit_button("Create report", type="primary")

        if submitted:
            try:
                require_text(template, "Template")
                require_email(user_mail, "Owner email")
                report = controller.create_report(template, user_mail)
                st.success(f"Report {report.id} created.")
            except ValidationError as e:
                st.error(str(e))
            except ReportConsoleError as e:
                st.error(f"Could not create report: {e}")


def _render_report_editor(controller: ReportsController, report: Report) -> None:
    status = "🟢 active" if report.active else "⚪ inactive"
    with st.expander(f"#{report.id} · {report.user_mail} · {status}"):
        st.caption(f"Created {report.create_at or 'n/a'} | Updated {report.update_at or 'n/a'}")
        with st.form(f"edit_form_{report.id}"):
            template = st.text_area("Template", value=report.template, height=200, key=f"template_{report.id}")
            save = st.form_submit_button("Save changes")
        if save:
            try:
                require_text(template, "Template")
                controller.update_report(report.id, template)
            except ValidationError as e:
                st.error(str(e))
            except ReportConsoleError as e:
                st.error(f"Could not update report {report.id}: {e}")
            else:
                st.session_state.flash = f"Report {report.id} updated."
                st.rerun()

        toggle_label = "Deactivate" if report.active else "Activate"
        if st.button(toggle_label, key=f"toggle_{report.id}"):
            try:
                controller.toggle_report_status(report.id, not report.active)
                st.rerun()
            except ReportConsoleError as e:
                st.error(f"Could not change status of report {report.id}: {e}")


def _render_pagination(controller: ReportsController) -> None:
    pagination = controller.pagination
    prev_col, info_col, next_col, size_col = st.columns([1, 3, 1, 2])
    with prev_col:
        if st.button("← Prev", disabled=not pagination.has_previous, use_container_width=True):
            controller.change_page(pagination.page - 1)
            st.rerun()
    with info_col:
        st.caption(
            f"Page {pagination.page} of {max(pagination.total_pages, 1)} · {pagination.total_count} reports"
        )
    with next_col:
        if st.button("Next →", disabled=not pagination.has_next, use_container_width=True):
            controller.change_page(pagination.page + 1)
            st.rerun()
    with size_col:
        options = sorted(set(PAGE_SIZE_OPTIONS + [pagination.page_size]))
        page_size = st.selectbox("Page size", options, index=options.index(pagination.page_size))
        if page_size != pagination.page_size:
            controller.change_page_size(page_size)
            st.rerun()


def _render_manager_page() -> None:
    controller: ReportsController = st.session_state.reports_controller
    st.title("Report Manager")
    st.caption("Create, edit and enable report templates.")

    flash = st.session_state.pop("flash", None)
    if flash:
        st.success(flash)

    _render_filters(controller)
    _render_create_form(controller)

    if controller.error:
        st.error(controller.error)

    reports = controller.reports
    st.markdown("### Reports")
    if not reports:
        if controller.active_filter:
            st.info("No reports match the current filter.")
        else:
            st.info("No reports yet. Create the first one above.")
        return

    st.dataframe(_reports_frame(reports), use_container_width=True, hide_index=True)
    for report in reports:
        _render_report_editor(controller, report)
    _render_pagination(controller)


def _render_upload_preview(preview: Dict[str, Any]) -> None:
    if preview.get("status") != "ok":
        st.caption(f"Preview unavailable: {preview.get('error', 'unknown reason')}")
        return
    if preview["format"] == "csv":
        st.caption(f"{preview['rows']} rows · {len(preview['columns'])} columns")
        st.dataframe(preview["head"], use_container_width=True)
    elif preview["format"] == "pdf":
        st.caption(f"{preview['pages']} pages")
        if preview.get("text_excerpt"):
            st.text(preview["text_excerpt"])
    else:
        for sheet_name, sheet in preview.get("sheets", {}).items():
            st.caption(f"Sheet {sheet_name}: {sheet['rows']} rows · {len(sheet['columns'])} columns")
            st.dataframe(sheet["head"], use_container_width=True)


def _render_generate_page() -> None:
    controller: GenerationController = st.session_state.generation_controller
    validator = UploadValidator()
    st.title("Generate Report")
    st.caption("Upload a PDF, CSV or Excel file and fill a report template with AI.")

    with st.form("generate_form"):
        id_col, provider_col, model_col = st.columns([1, 1, 2])
        with id_col:
            report_id = st.number_input("Report ID", min_value=0, step=1, value=0)
        with provider_col:
            provider = st.selectbox(
                "Provider",
                PROVIDER_OPTIONS,
                index=PROVIDER_OPTIONS.index(CONFIG.generation.provider)
                if CONFIG.generation.provider in PROVIDER_OPTIONS
                else 0,
                format_func=lambda value: value or "service default",
            )
        with model_col:
            model = st.text_input("Model", value=CONFIG.generation.model_name, placeholder="service default")
        prompt = st.text_area("Prompt (optional)", height=100)
        uploaded = st.file_uploader(
            "Source file",
            type=validator.uploader_types,
            help=f"PDF, CSV, XLS or XLSX up to {CONFIG.upload.max_file_size_mb} MB",
        )
        generate = st.form_submit_button("Generate", type="primary", disabled=controller.loading)

    upload = UploadedFile.from_streamlit(uploaded) if uploaded is not None else None
    if upload is not None:
        with st.expander(f"Preview of {upload.name}", expanded=False):
            _render_upload_preview(UploadPreviewer().preview(upload))

    if generate:
        try:
            if upload is None:
                raise ValidationError("Provide a Report ID and select a file")
            request = GenerateReportRequest(
                report_id=require_positive_id(int(report_id), "Report ID"),
                file=validator.validate(upload),
                prompt=prompt or None,
                model=model or None,
                provider=provider or None,
            )
            with st.spinner("Generating report..."):
                controller.generate_report(request)
            st.success("Report generated.")
        except ValidationError as e:
            st.error(str(e))
        except GenerationError as e:
            st.error(f"Generation failed: {e}")

    if controller.error and not generate:
        st.error(controller.error)

    if controller.generated_report:
        st.markdown("### Result")
        download = controller.download_report(CONFIG.generation.download_file_name)
        dl_col, reset_col, _ = st.columns([1, 1, 4])
        with dl_col:
            st.download_button(
                "⬇ Download HTML",
                data=download.data,
                file_name=download.file_name,
                mime=download.mime,
            )
        with reset_col:
            if st.button("New generation"):
                controller.reset_report()
                st.rerun()
        components.html(controller.generated_report, height=800, scrolling=True)


configure_logging()
_initialize_state()

with st.sidebar:
    st.markdown("## ReportAI Console")
    page = st.radio("Page", PAGES, index=0)
    st.caption(f"Service: {api.base_url}")
    if st.button("Check Service Connection", use_container_width=True):
        if api.health_check():
            st.success(f"Report service reachable ({api.service_root})")
        else:
            st.error(f"Report service check failed: {api.last_error or 'No response'}")

if page == "Report Manager":
    _render_manager_page()
else:
    _render_generate_page()
