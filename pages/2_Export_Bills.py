import logging

import streamlit as st

from domain.exceptions import BillingError
from element_component import EXPORT_STATE, GENERATION_STATE
from services.export_service import ON_ERROR_ABORT, ON_ERROR_SKIP, BillExportJob

logger = logging.getLogger(__name__)

st.set_page_config(page_title="Export Bills", page_icon="📦")
st.sidebar.header("📦 Export Bills")

generation = st.session_state.get(GENERATION_STATE)
if not generation:
    st.warning("No bills yet. Generate bills first.")
    st.stop()

bills = generation["result"].bills
st.write(f"**{len(bills)}** bills from {generation['start_date']} to {generation['end_date']}.")

skip_failures = st.checkbox("Skip bills that fail to render", value=False)

if st.button("Download All Bills", type="primary"):
    st.session_state.pop(EXPORT_STATE, None)

    job = BillExportJob(
        bills,
        generation["start_date"],
        generation["end_date"],
        bar=generation["bar"],
        on_error=ON_ERROR_SKIP if skip_failures else ON_ERROR_ABORT,
    )
    bar_progress = st.progress(0.0, text="Rendering bills...")
    try:
        for progress in job.steps():
            bar_progress.progress(
                progress.fraction,
                text=f"Rendering bills... {progress.completed}/{progress.total}",
            )
    except BillingError as e:
        logger.exception("Export failed")
        st.error(f"Failed to generate bills: {e}")
    else:
        st.session_state[EXPORT_STATE] = job.result()

export_result = st.session_state.get(EXPORT_STATE)

if export_result:
    if export_result.failed:
        st.warning(f"Export finished: {export_result.summary}")
        for bill_number, message in export_result.failed:
            st.caption(f"Bill {bill_number}: {message}")
    else:
        st.success(f"Export finished: {export_result.summary}")

    st.download_button(
        "Save Archive",
        data=export_result.archive_bytes,
        file_name=export_result.archive_name,
        mime="application/zip",
    )
