# app/main.py

import streamlit as st
from dotenv import load_dotenv
from ui.login import login_page, logout
from ui.dashboard import dashboard_page
from ui.chat import chat_page


load_dotenv()


st.set_page_config(page_title="Finance Copilot", page_icon="💰", layout="wide")

def main_page():
    st.title(f"Hi, {st.session_state['username']}!")

    st.sidebar.markdown("## 📋 Menu")

    if st.sidebar.button("📊 Dashboard"):
        st.session_state["page"] = "dashboard"
    if st.sidebar.button("💬 AI Advisor"):
        st.session_state["page"] = "chat"
    if st.sidebar.button("🔓 Log out"):
        logout()
        st.session_state.clear()
        st.rerun()

    page = st.session_state.get("page", "dashboard")
    if page == "dashboard":
        dashboard_page()
    elif page == "chat":
        chat_page()


if "access_token" not in st.session_state:
    login_page()
else:
    main_page()
