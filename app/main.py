from __future__ import annotations

import sys
import os
import logging

# --- Add project root to sys.path ---
current_dir = os.path.dirname(os.path.abspath(__file__))
parent_dir = os.path.dirname(current_dir)
if parent_dir not in sys.path:
    sys.path.insert(0, parent_dir)

import streamlit as st

# IMPORTS
from app.config import load_config
from app.logging_config import setup_logging
from app.auth import current_user, sign_in, sign_out, sign_up
from app.admin_dashboard import render_admin_dashboard
from app.booking_site import render_booking_site, render_customer_dashboard
from app.profiles import fetch_user_profile, is_admin
from app.validators import ValidationError
from db.database import get_store, get_supabase_client
from db.store import DataStoreError

logger = logging.getLogger(__name__)

PAGES = ["Book a Service", "My Dashboard", "Admin Panel"]


# --- CSS STYLING ---
def inject_custom_css():
    st.markdown("""
    <style>
        /* --- Hide Footer for clean look --- */
        footer {visibility: hidden;}

        div[data-testid="stMetricValue"] {
            font-size: 1.6rem;
        }
    </style>
    """, unsafe_allow_html=True)


def render_account_sidebar(client):
    user = current_user(st.session_state)
    if user:
        st.caption(f"Signed in as **{user.email}**")
        if st.button("Sign out"):
            sign_out(client, st.session_state)
            st.rerun()
        return

    login_tab, signup_tab = st.tabs(["Sign in", "Sign up"])
    with login_tab:
        with st.form("sign_in"):
            email = st.text_input("Email")
            password = st.text_input("Password", type="password")
            submitted = st.form_submit_button("Sign in")
        if submitted:
            try:
                sign_in(client, st.session_state, email, password)
            except ValidationError as e:
                st.error(f"⚠️ {e}")
            except DataStoreError:
                st.error("Sign-in failed. Check your email and password.")
            else:
                st.rerun()

    with signup_tab:
        with st.form("sign_up", clear_on_submit=True):
            first_name = st.text_input("First name")
            last_name = st.text_input("Last name")
            email = st.text_input("Email")
            password = st.text_input("Password", type="password")
            submitted = st.form_submit_button("Create account")
        if submitted:
            try:
                sign_up(client, email, password, first_name, last_name)
            except ValidationError as e:
                st.error(f"⚠️ {e}")
            except DataStoreError:
                st.error("Sign-up failed. Please try again.")
            else:
                st.success("Account created! Check your inbox to verify your email, then sign in.")


def main():
    st.set_page_config(
        page_title="Sparkle Cleaning Services",
        page_icon="✨",
        layout="wide",
        initial_sidebar_state="expanded",
    )

    inject_custom_css()
    cfg = load_config()
    setup_logging(cfg.log_level)

    client = get_supabase_client()
    store = get_store()

    # --- SIDEBAR NAVIGATION ---
    with st.sidebar:
        st.title("Navigation")
        menu = st.radio("Go to", PAGES)
        st.divider()
        render_account_sidebar(client)

    user = current_user(st.session_state)

    if menu == "Book a Service":
        render_booking_site(cfg, store, user)
    elif menu == "My Dashboard":
        render_customer_dashboard(cfg, store, user)
    else:
        run_admin_panel(cfg, store, user)


def run_admin_panel(cfg, store, user):
    if user is None:
        st.info("🔒 Please sign in with an admin account to open the admin panel.")
        return
    try:
        profile = fetch_user_profile(store, user.id)
    except DataStoreError:
        st.error("Could not verify your account. Please try again.")
        return
    if not is_admin(profile):
        logger.warning("User %s tried to open the admin panel without the admin role", user.id)
        st.error("🚫 You do not have access to the admin panel.")
        return
    render_admin_dashboard(cfg, store)


if __name__ == "__main__":
    main()
