# app/ui/dashboard.py

from datetime import date
import streamlit as st
from services.api import add_transaction, get_summary, list_transactions


CATEGORIES = [
    "salary", "freelance", "food", "housing", "transport",
    "utilities", "entertainment", "health", "shopping", "other",
]


def dashboard_page():
    token = st.session_state["access_token"]
    st.markdown("# 📊 Dashboard")

    summary = get_summary(token)
    if summary.get("error"):
        st.error(summary["error"])
        return

    cols = st.columns(4)
    cols[0].metric("Income", f"${summary.get('totalIncome', 0):,.2f}")
    cols[1].metric("Expenses", f"${summary.get('totalExpenses', 0):,.2f}")
    cols[2].metric("Balance", f"${summary.get('balance', 0):,.2f}")
    cols[3].metric("Transactions", summary.get("transactionCount", 0))

    with st.expander("➕ Add transaction"):
        handle_add_transaction(token)

    st.markdown("### 🧾 Transactions")
    transactions = list_transactions(token)
    if isinstance(transactions, dict) and transactions.get("error"):
        st.error(transactions["error"])
        return

    if not transactions:
        st.info("No transactions yet. Add your first income or expense above.")
        return

    st.dataframe(
        [
            {
                "Date": t["date"],
                "Description": t["description"],
                "Category": t["category"],
                "Type": t["type"],
                "Amount": t["amount"] if t["type"] == "income" else -t["amount"],
            }
            for t in transactions
        ],
        use_container_width=True,
        hide_index=True,
    )


def handle_add_transaction(token):
    with st.form("add_transaction_form", clear_on_submit=True):
        description = st.text_input("Description")
        amount = st.number_input("Amount", min_value=0.0, step=1.0, format="%.2f")
        kind = st.radio("Type", options=["expense", "income"], horizontal=True)
        category = st.selectbox("Category", options=CATEGORIES)
        when = st.date_input("Date", value=date.today())
        submitted = st.form_submit_button("Save")

    if submitted:
        result = add_transaction(token, description, amount, kind, category, when.isoformat())
        if result.get("error"):
            st.error(f"❌ {result['error']}")
        else:
            st.success("✅ Transaction added!")
            st.rerun()
