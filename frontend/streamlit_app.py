#frontend/streamlit_app.py

import logging
from datetime import date

import pandas as pd
import plotly.express as px
import plotly.graph_objects as go
import streamlit as st

from frontend.api import ApiClient
from frontend.export import export_filename
from frontend.formatting import format_currency, format_date_for_display
from frontend.state import CATEGORIES, AppState, FinanceController

logging.basicConfig(level=logging.INFO)

# ---------------- Page config ----------------
st.set_page_config(page_title="Finance Tracker", layout="wide", page_icon="💰")

COLORS = ['#0088FE', '#00C49F', '#FFBB28', '#FF8042', '#8884D8', '#82ca9d', '#ffc658']


# ---------------- Session State Management ----------------
def get_controller():
    # one controller (and so one AppState) per browser session; the theme
    # lives in the url so a page refresh keeps it
    if "controller" not in st.session_state:
        state = AppState(theme=st.query_params.get("theme", "dark"))
        st.session_state.controller = FinanceController(ApiClient(), state)
    return st.session_state.controller


def chart_template(theme):
    return "plotly_dark" if theme == "dark" else "plotly_white"


# ---------------- Authentication ----------------
def render_auth(controller):
    state = controller.state
    st.title("💰 Finance Tracker")
    auth_tab = st.radio("Action", ["Login", "Register"], horizontal=True, key="auth_tab")

    with st.form("auth_form"):
        email = st.text_input("📧 Email", key="email_input")
        password = st.text_input("🔒 Password", type="password", key="password_input")
        submitted = st.form_submit_button(
            "Sign up" if auth_tab == "Register" else "Login",
            use_container_width=True,
            disabled=state.loading,
        )

    if submitted:
        if not email or not password:
            st.warning("Please enter both email and password")
            return
        ok = controller.sign_up(email, password) if auth_tab == "Register" else controller.sign_in(email, password)
        if ok:
            st.rerun()

    if state.error:
        st.error(f"❌ {state.error}")


# ---------------- Sidebar ----------------
def render_sidebar(controller):
    state = controller.state
    with st.sidebar:
        st.title("💼 FinanceTracker")
        if st.button("📊 Dashboard", use_container_width=True, key="nav_dashboard"):
            controller.navigate("dashboard")
        if st.button("➕ Add New", use_container_width=True, key="nav_add"):
            controller.navigate("addTransaction")
        theme_label = "🌙 Dark mode" if state.theme == "light" else "☀️ Light mode"
        if st.button(theme_label, use_container_width=True, key="theme_toggle"):
            st.query_params["theme"] = controller.toggle_theme()
            st.rerun()

        st.markdown("---")
        st.caption(f"Logged in as **{state.user.get('email')}**")
        if st.button("🚪 Logout", use_container_width=True, key="logout_btn"):
            controller.sign_out()
            st.rerun()


# ---------------- Dashboard ----------------
def render_category_pie(data, title, theme):
    if not data:
        st.info(f"No data for {title.lower()}")
        return
    cat_df = pd.DataFrame(data, columns=["name", "value"])
    fig = px.pie(cat_df, names="name", values="value", title=title, hole=0.4,
                 color_discrete_sequence=COLORS, template=chart_template(theme))
    st.plotly_chart(fig, use_container_width=True)


def render_transaction_table(controller):
    state = controller.state
    header = st.columns([2, 4, 2, 2, 2, 1])
    for col, label in zip(header, ["Date", "Description", "Category", "Type", "Amount", ""]):
        col.markdown(f"**{label}**")

    for tx in state.transactions:
        cols = st.columns([2, 4, 2, 2, 2, 1])
        cols[0].write(format_date_for_display(tx.get("date")))
        cols[1].write(tx.get("description", ""))
        cols[2].write(tx.get("category", ""))
        cols[3].write(tx.get("type", "").capitalize())
        sign = "+" if tx.get("type") == "income" else "-"
        cols[4].write(f"{sign}{format_currency(tx.get('amount'))}")
        if cols[5].button("🗑️", key=f"delete_{tx['_id']}", disabled=state.loading):
            controller.delete_transaction(tx["_id"])
            st.rerun()


def render_dashboard(controller):
    state = controller.state
    summary = controller.summary

    top_left, top_right = st.columns([3, 1])
    top_left.header("📊 Dashboard Overview")
    top_right.download_button(
        "⬇️ Export to CSV",
        data=controller.export_csv(),
        file_name=export_filename(),
        mime="text/csv",
        disabled=not state.transactions,
        use_container_width=True,
    )

    # Summary cards
    col1, col2, col3 = st.columns(3)
    col1.metric("📈 Total Income", format_currency(summary.total_income))
    col2.metric("📉 Total Expenses", format_currency(summary.total_expenses))
    col3.metric("💰 Balance", format_currency(summary.balance))

    if state.loading:
        st.info("Loading transactions...")
        return
    if not state.transactions:
        st.info("💳 No transactions found. Add your first transaction!")
        return

    # Charts
    col1, col2 = st.columns(2)
    with col1:
        render_category_pie(summary.expense_by_category, "Expenses by Category", state.theme)
    with col2:
        render_category_pie(summary.income_by_category, "Income by Category", state.theme)

    fig_bar = go.Figure(data=[
        go.Bar(name="Income", x=["Income"], y=[summary.total_income], marker_color="#00C49F"),
        go.Bar(name="Expenses", x=["Expenses"], y=[summary.total_expenses], marker_color="#FF8042"),
    ])
    fig_bar.update_layout(title="Income vs Expenses", template=chart_template(state.theme), showlegend=False)
    st.plotly_chart(fig_bar, use_container_width=True)

    st.subheader("📋 Transactions")
    render_transaction_table(controller)


# ---------------- Add Transaction ----------------
def render_add_transaction(controller):
    state = controller.state
    st.header("➕ Add New Transaction")

    # type sits outside the form so the category list follows it
    t_type = st.selectbox("🔸 Type", ["expense", "income"], format_func=str.capitalize, key="tx_type")

    with st.form("add_transaction", clear_on_submit=True):
        t_desc = st.text_input("📝 Description", placeholder="e.g., Groceries, Salary", key="tx_desc")
        t_amount = st.number_input("₹ Amount (INR)", min_value=0.0, value=0.0, format="%.2f", step=100.0, key="tx_amount")
        t_cat = st.selectbox("🏷️ Category", CATEGORIES[t_type])
        t_date = st.date_input("📅 Date", value=date.today(), max_value=date.today(), key="tx_date")

        submitted = st.form_submit_button(
            "Adding..." if state.loading else "💾 Add Transaction",
            use_container_width=True,
            disabled=state.loading,
        )

    if submitted:
        form = {
            "description": t_desc,
            "amount": t_amount,
            "type": t_type,
            "category": t_cat,
            "date": t_date,
        }
        # errors land in state.error and show at the top after the rerun
        controller.add_transaction(form)
        st.rerun()


# ---------------- Main App ----------------
def main():
    controller = get_controller()
    state = controller.state

    if not state.logged_in:
        render_auth(controller)
        return

    render_sidebar(controller)

    if state.error:
        st.error(f"❌ {state.error}")

    if state.page == "addTransaction":
        render_add_transaction(controller)
    else:
        render_dashboard(controller)


if __name__ == "__main__":
    main()
