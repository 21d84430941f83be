from __future__ import annotations

import logging
from datetime import date

import pandas as pd
import streamlit as st

from db.store import DataStore, DataStoreError
from app.auth import SessionUser
from app.bookings import (
    BookingForm,
    COMPLETED,
    TIME_SLOTS,
    create_booking,
    fetch_user_bookings,
    status_of,
)
from app.catalog import fetch_services, service_label
from app.config import AppConfig
from app.customers import fetch_user_points, level_progress, points_to_next_level
from app.feedback import completed_bookings, submit_feedback
from app.notifications import send_booking_confirmation
from app.profiles import fetch_user_profile, full_name, update_profile
from app.state import ensure_view, refresh_view, run_action
from app.validators import ValidationError, to_amount


logger = logging.getLogger(__name__)

STATUS_BADGES = {
    "Pending": "🟡",
    "Confirmed": "🔵",
    "In Progress": "🟣",
    "Completed": "🟢",
    "Cancelled": "🔴",
}


# ---------------------- BOOKING SITE ----------------------

def render_booking_site(cfg: AppConfig, store: DataStore, user: SessionUser | None):
    st.title(f"✨ {cfg.company_name}")
    st.caption("Experience spotless spaces with our professional cleaning services.")

    services = ensure_view(
        st.session_state,
        "view:services:active",
        lambda: fetch_services(store, active_only=True),
        "Failed to load services",
        default=[],
    )

    st.subheader("Our Services")
    if not services:
        st.info("No services are available right now. Please check back soon.")
    else:
        cols = st.columns(min(len(services), 3))
        for i, service in enumerate(services):
            with cols[i % len(cols)]:
                with st.container(border=True):
                    st.markdown(f"**{service.get('name')}**")
                    if service.get("description"):
                        st.caption(service["description"])
                    st.markdown(f"### ₹{to_amount(service.get('price')):,.0f}")
                    if service.get("duration_hours"):
                        st.caption(f"⏱ {service['duration_hours']} hours")

    st.divider()
    render_booking_form(cfg, store, services, user)


def render_booking_form(cfg: AppConfig, store: DataStore, services, user: SessionUser | None):
    st.subheader("Book a Service")

    profile = None
    if user:
        try:
            profile = fetch_user_profile(store, user.id)
        except DataStoreError:
            # the form still works without prefill
            profile = None

    if not services:
        st.warning("Booking is unavailable until services are loaded.")
        return

    service_ids = [s["id"] for s in services]
    labels = {s["id"]: service_label(s) for s in services}

    with st.form("booking_form", clear_on_submit=False):
        service_id = st.selectbox("Service *", service_ids, format_func=lambda sid: labels[sid])
        c1, c2 = st.columns(2)
        booking_date = c1.date_input("Date *", min_value=date.today())
        booking_time = c2.selectbox("Time *", TIME_SLOTS)
        customer_name = st.text_input("Full name *", value=full_name(profile))
        c3, c4 = st.columns(2)
        customer_email = c3.text_input("Email *", value=user.email if user else "")
        customer_phone = c4.text_input("Phone", value=(profile or {}).get("phone_number") or "")
        address = st.text_area("Address *")
        notes = st.text_area("Notes")
        submitted = st.form_submit_button("Book Now")

    if not submitted:
        return

    form = BookingForm(
        service_id=service_id,
        booking_date=booking_date,
        booking_time=booking_time,
        customer_name=customer_name,
        customer_email=customer_email,
        customer_phone=customer_phone,
        address=address,
        notes=notes,
    )
    try:
        booking = create_booking(store, form, services, user_id=user.id if user else None)
    except ValidationError as e:
        st.error(f"⚠️ {e}")
        return
    except DataStoreError as e:
        logger.error("Error creating booking: %s", e)
        st.toast("Failed to create booking. Please try again.", icon="⚠️")
        return

    st.success("🎉 Booking created successfully! We will confirm your slot shortly.")
    result = send_booking_confirmation(cfg.email, booking, cfg.company_name)
    if not result["success"]:
        st.warning("Your booking is saved, but the confirmation email could not be sent.")
    st.session_state.pop("view:my_bookings", None)


# ---------------------- CUSTOMER DASHBOARD ----------------------

def render_customer_dashboard(cfg: AppConfig, store: DataStore, user: SessionUser | None):
    st.title("🏠 My Dashboard")
    if user is None:
        st.info("Please sign in from the sidebar to see your bookings and loyalty points.")
        return

    if st.button("🔄 Refresh"):
        refresh_view(st.session_state, "view:my_bookings", lambda: fetch_user_bookings(store, user.id), "Failed to load your bookings")
        refresh_view(st.session_state, "view:my_points", lambda: fetch_user_points(store, user.id), "Failed to load your points")

    bookings = ensure_view(
        st.session_state, "view:my_bookings", lambda: fetch_user_bookings(store, user.id), "Failed to load your bookings", default=[]
    )
    points = ensure_view(
        st.session_state, "view:my_points", lambda: fetch_user_points(store, user.id), "Failed to load your points", default=0
    )

    # --- KPI Metrics ---
    col1, col2, col3 = st.columns(3)
    col1.metric("Loyalty Points", points)
    col2.metric("Completed Bookings", sum(1 for b in bookings if status_of(b) == COMPLETED))
    col3.metric("Total Spent", f"₹{sum(to_amount(b.get('total_amount')) for b in bookings):,.0f}")

    st.progress(level_progress(points), text=f"{points_to_next_level(points)} points to next level")

    st.subheader("My Bookings")
    if not bookings:
        st.info("You have no bookings yet.")
    else:
        df = pd.DataFrame(bookings)
        df["status"] = [f"{STATUS_BADGES.get(status_of(b), '')} {status_of(b)}" for b in bookings]
        display_cols = ["service_name", "booking_date", "booking_time", "address", "total_amount", "status"]
        st.dataframe(df[[c for c in display_cols if c in df.columns]], use_container_width=True, hide_index=True)

    render_feedback_form(store, user, bookings)
    render_profile_section(store, user)


def render_profile_section(store: DataStore, user: SessionUser):
    st.subheader("👤 My Profile")
    profile = ensure_view(
        st.session_state, "view:my_profile", lambda: fetch_user_profile(store, user.id), "Failed to load your profile"
    ) or {}

    with st.form("profile_form"):
        c1, c2 = st.columns(2)
        first_name = c1.text_input("First name *", value=profile.get("first_name") or "")
        last_name = c2.text_input("Last name *", value=profile.get("last_name") or "")
        st.text_input("Email", value=user.email, disabled=True)
        phone_number = st.text_input("Phone number", value=profile.get("phone_number") or "")
        submitted = st.form_submit_button("Save Profile")

    if not submitted:
        return

    updates = {"first_name": first_name, "last_name": last_name, "phone_number": phone_number}
    try:
        saved = run_action(
            lambda: update_profile(store, user.id, updates),
            "Profile updated successfully!",
            "Failed to update profile. Please try again.",
        )
    except ValidationError as e:
        st.error(f"⚠️ {e}")
        return
    if saved:
        st.session_state.pop("view:my_profile", None)


def render_feedback_form(store: DataStore, user: SessionUser, bookings):
    st.subheader("⭐ Rate a Completed Service")
    done = completed_bookings(bookings)
    if not done:
        st.caption("You can leave feedback once a booking is completed.")
        return

    by_id = {b["id"]: b for b in done}
    with st.form("feedback_form", clear_on_submit=True):
        booking_id = st.selectbox(
            "Booking",
            list(by_id),
            format_func=lambda bid: f"{by_id[bid].get('service_name')} on {by_id[bid].get('booking_date')}",
        )
        rating = st.slider("Rating", 1, 5, 5)
        comment = st.text_area("Comment (optional)")
        submitted = st.form_submit_button("Submit Feedback")

    if submitted:
        try:
            run_action(
                lambda: submit_feedback(store, by_id.get(booking_id), rating, comment, customer_email=user.email),
                "Thank you for your feedback! 🌟",
                "Failed to submit feedback",
            )
        except ValidationError as e:
            st.error(f"⚠️ {e}")
