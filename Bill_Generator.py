import logging
from datetime import date

import streamlit as st

from domain.exceptions import BillingError
from element_component import (
    EXPORT_STATE,
    GENERATION_STATE,
    SAVED_STATE,
    bills_to_dataframe,
    confirm_save_bills_dialog,
    get_store,
)
from services.bill_generation_service import BillGenerationRun, format_skipped_dates
from services.bill_packing import PACKING_STRATEGIES
from services.customer_assignment import default_random_source, seeded_random_source
from settings import load_settings
from utils.formatting import format_rupee
from utils.logging_setup import configure_logging

settings = load_settings()
configure_logging(settings.log_level)
logger = logging.getLogger(__name__)

st.set_page_config(page_title="Generate Bills", page_icon="🧾")
st.title("🧾 Generate Bills")

st.session_state.setdefault(SAVED_STATE, False)

# -----------------------------------------------------------------------------
# 1) Bar, date range, tax
# -----------------------------------------------------------------------------
store = get_store()

try:
    bars = store.get_bars()
except BillingError as e:
    logger.exception("Could not load bars")
    st.error(f"Could not load bars: {e}")
    st.stop()

if not bars:
    st.warning("No bars found. Add a bar first.")
    st.stop()

bar_by_name = {bar.name: bar for bar in bars}
bar_name = st.selectbox("Bar", options=list(bar_by_name.keys()))
bar = bar_by_name[bar_name]

col_start, col_end, col_tax = st.columns(3)
with col_start:
    start_date = st.date_input("Start Date", value=date.today())
with col_end:
    end_date = st.date_input("End Date", value=date.today())
with col_tax:
    tax_percent = st.number_input(
        "Service Tax (%)",
        min_value=0.0,
        max_value=100.0,
        value=float(settings.default_tax_percent),
        step=0.5,
    )

with st.expander("Advanced"):
    packing_name = st.selectbox("Packing", options=list(PACKING_STRATEGIES.keys()))
    seed = st.number_input(
        "Customer seed",
        min_value=0,
        value=0,
        step=1,
        help="0 picks customers at random. Any other value repeats the same customer picks.",
    )

st.divider()

# -----------------------------------------------------------------------------
# 2) Generate
# -----------------------------------------------------------------------------
if st.button("Generate Bills", type="primary"):
    st.session_state[SAVED_STATE] = False
    st.session_state.pop(GENERATION_STATE, None)
    st.session_state.pop(EXPORT_STATE, None)

    try:
        run = BillGenerationRun(
            store,
            bar.id,
            start_date,
            end_date,
            str(tax_percent),
            packing=PACKING_STRATEGIES[packing_name],
            entry_cap=settings.entry_cap,
            quantity_cap=settings.quantity_cap,
            random_source=seeded_random_source(int(seed)) if seed else default_random_source,
        )
        bar_progress = st.progress(0.0, text="Generating bills...")
        for progress in run.steps():
            bar_progress.progress(
                progress.fraction,
                text=f"Generating bills... {progress.current_date} ({round(progress.fraction * 100)}%)",
            )
        result = run.result()
    except BillingError as e:
        logger.exception("Bill generation failed")
        st.error(f"Failed to generate bills: {e}")
    else:
        if result.skipped_dates:
            st.toast(format_skipped_dates(result.skipped_dates), icon="⚠️")

        if result.bills:
            st.session_state[GENERATION_STATE] = {
                "result": result,
                "bar": bar,
                "start_date": start_date,
                "end_date": end_date,
            }
        else:
            st.error("No bills generated. No sales data found for the selected date range.")

# -----------------------------------------------------------------------------
# 3) Summary + save
# -----------------------------------------------------------------------------
generation = st.session_state.get(GENERATION_STATE)

if generation:
    result = generation["result"]
    bills = result.bills

    st.subheader("Generated Bills")
    col_count, col_total = st.columns(2)
    col_count.metric("Bills", len(bills))
    col_total.metric("Grand Total", format_rupee(sum(b.final_total for b in bills)))

    if result.skipped_dates:
        st.caption(format_skipped_dates(result.skipped_dates))

    st.dataframe(bills_to_dataframe(bills), width="stretch", hide_index=True)
    st.info("Open **Preview Bills** or **Export Bills** in the sidebar to print or download.")

    if st.button("Save Bill Numbers", disabled=st.session_state[SAVED_STATE]):
        confirm_save_bills_dialog(generation["bar"].id, bills, SAVED_STATE)

    if st.session_state[SAVED_STATE]:
        st.success(f"Bills saved. Last bill number: {result.last_bill_number}")
