import streamlit as st

from element_component import GENERATION_STATE, bill_entries_dataframe
from services.doc_service import DOCX_MIME, build_preview
from services.pagination import GRID_COLUMNS
from settings import load_settings
from utils.formatting import format_bill_date, format_percent, format_rupee

settings = load_settings()

st.set_page_config(page_title="Preview Bills", page_icon="🖨️")
st.sidebar.header("🖨️ Preview Bills")

generation = st.session_state.get(GENERATION_STATE)
if not generation:
    st.warning("No bills yet. Generate bills first.")
    st.stop()

bills = generation["result"].bills
bar = generation["bar"]

pages, preview_doc = build_preview(bills, bar, settings.bills_per_page)

st.download_button(
    "Download Print Layout",
    data=preview_doc,
    file_name=f"preview_{generation['start_date']}_to_{generation['end_date']}.docx",
    mime=DOCX_MIME,
)

page_number = st.selectbox(
    "Page",
    options=[page.number for page in pages],
    format_func=lambda n: f"Page {n} of {len(pages)}",
)
page = pages[page_number - 1]

# -----------------------------------------------------------------------------
# Page grid, same layout as the printed sheet
# -----------------------------------------------------------------------------
for row_start in range(0, len(page.bills), GRID_COLUMNS):
    cols = st.columns(GRID_COLUMNS)
    for col, bill in zip(cols, page.bills[row_start:row_start + GRID_COLUMNS]):
        with col, st.container(border=True):
            st.markdown(f"**Sales Bill** · No {bill.bill_number}")
            st.caption(f"{format_bill_date(bill.bill_date)} · {bill.customer.name} ({bill.customer.license_number})")
            st.dataframe(bill_entries_dataframe(bill), hide_index=True)
            st.caption(
                f"Sub Total {format_rupee(bill.subtotal)} · "
                f"Tax {format_percent(bill.tax_percent)}% {format_rupee(bill.tax_amount)}"
            )
            st.markdown(f"**Final Total: {format_rupee(bill.final_total)}**")
