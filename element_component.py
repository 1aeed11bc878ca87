from typing import List

import pandas as pd
import streamlit as st

from data_integrator import BillDataStore
from domain.exceptions import BillingError
from domain.models import Bill
from settings import load_settings
from utils.formatting import format_bill_date, format_rupee

GENERATION_STATE = "generation"
SAVED_STATE = "bills_saved"
EXPORT_STATE = "export_result"


@st.cache_resource
def get_store() -> BillDataStore:
    return BillDataStore.from_settings(load_settings())


def bills_to_dataframe(bills: List[Bill]) -> pd.DataFrame:
    rows = [
        {
            "Bill No": bill.bill_number,
            "Date": format_bill_date(bill.bill_date),
            "Customer": bill.customer.name,
            "License No": bill.customer.license_number,
            "Items": len(bill.entries),
            "Qty": sum(entry.quantity for entry in bill.entries),
            "Sub Total": format_rupee(bill.subtotal),
            "Tax": format_rupee(bill.tax_amount),
            "Final Total": format_rupee(bill.final_total),
        }
        for bill in bills
    ]
    return pd.DataFrame(rows)


def bill_entries_dataframe(bill: Bill) -> pd.DataFrame:
    return pd.DataFrame(
        [
            {
                "Sr": idx,
                "Item": entry.brand_name,
                "Size": entry.size,
                "MRP": format_rupee(entry.unit_price),
                "Qty": entry.quantity,
                "Total": format_rupee(entry.line_total),
            }
            for idx, entry in enumerate(bill.entries, start=1)
        ]
    )


@st.dialog("Confirm")
def confirm_save_bills_dialog(bar_id: str, bills: List[Bill], state_name: str):
    first, last = bills[0].bill_number, bills[-1].bill_number
    st.write(f"Save **{len(bills)}** bills ({first} to {last})?")
    st.caption("The next run will continue numbering after the last saved bill.")

    col_yes, col_no = st.columns(2)

    with col_yes:
        if st.button("Yes", type="primary", key="confirm_yes"):
            try:
                get_store().save_bills(bar_id, bills)
            except BillingError as e:
                st.error(str(e))
                return
            st.session_state[state_name] = True
            st.rerun()
    with col_no:
        if st.button("No"):
            st.rerun()
