# app/ui/login.py

import os
import streamlit as st
from dotenv import load_dotenv
from streamlit_cookies_manager import EncryptedCookieManager
from services.api import login_user, register_user

load_dotenv()

COOKIE_PASSWORD = os.getenv("COOKIE_PASSWORD")

cookies = EncryptedCookieManager(password=COOKIE_PASSWORD)
if not cookies.ready():
    st.stop()


def logout():
    cookies.clear()


def _store_session(result):
    st.session_state["access_token"] = result["token"]
    st.session_state["username"] = result["user"]["username"]
    cookies["access_token"] = result["token"]
    cookies["username"] = result["user"]["username"]
    cookies.save()


def login_page():
    st.title("💰 Finance Copilot")

    if "access_token" not in st.session_state:
        if "access_token" in cookies:
            st.session_state["access_token"] = cookies["access_token"]
            st.session_state["username"] = cookies["username"]
            st.rerun()

    if "show_register" not in st.session_state:
        st.session_state["show_register"] = False

    if st.session_state["show_register"]:
        show_register_form()
    else:
        show_login_form()


def show_login_form():
    with st.form("login_form"):
        email = st.text_input("Email")
        password = st.text_input("Password", type="password")
        submitted = st.form_submit_button("Log in")

    if submitted:
        with st.spinner("Logging in..."):
            result = login_user(email, password)
            if result.get("error"):
                st.error(f"❌ Login failed: {result['error']}")
            else:
                _store_session(result)
                st.success("✅ Welcome back!")
                st.rerun()

    if st.button("Create an account"):
        st.session_state["show_register"] = True
        st.rerun()


def show_register_form():
    st.subheader("📝 Sign up")

    with st.form("register_form"):
        username = st.text_input("Username")
        email = st.text_input("Email")
        password = st.text_input("Password", type="password", help="At least 6 characters")
        submitted = st.form_submit_button("Sign up")

    if submitted:
        with st.spinner("Creating account..."):
            result = register_user(username, email, password)
            if result.get("error"):
                st.error(f"❌ Sign up failed: {result['error']}")
            else:
                _store_session(result)
                st.session_state["show_register"] = False
                st.success("🎉 Account created!")
                st.rerun()

    if st.button("← Back to login"):
        st.session_state["show_register"] = False
        st.rerun()
