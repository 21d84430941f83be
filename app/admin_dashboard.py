import logging
from datetime import date

import streamlit as st
import pandas as pd
import plotly.express as px

from db.inspection_store import InspectionStoreError, JsonFileInspectionStore
from db.store import DataStore, DataStoreError
from app import bookings as bk
from app import catalog, customer_records as cr, employees as emp, inventory, vendors as vnd
from app.config import AppConfig
from app.customers import (
    add_customer,
    fetch_customer_summaries,
    search_customers,
    sort_for_display,
    update_customer,
)
from app.dashboard import fetch_dashboard
from app.feedback import average_feedback_rating, fetch_feedback
from app.inspections import (
    INSPECTION_STATUSES,
    add_inspection,
    load_inspections,
    remove_inspection,
    schedule_inspection_from_booking,
    update_inspection_status,
)
from app.revenue import daily_revenue, fetch_accounts, monthly_revenue_series, status_breakdown
from app.state import ensure_view, refresh_view, run_action
from app.validators import ValidationError, to_amount

logger = logging.getLogger(__name__)

SECTIONS = [
    "Dashboard",
    "Bookings",
    "Customers",
    "Services",
    "Stocks",
    "Vendors",
    "Employees",
    "Inspections",
    "Revenue",
    "Feedback",
]


def _view(key, fetch, error_message, default=None):
    return ensure_view(st.session_state, key, fetch, error_message, default=default)


def _refresh_button(key, fetch, error_message, label="🔄 Refresh"):
    if st.button(label, key=f"refresh-{key}"):
        refresh_view(st.session_state, key, fetch, error_message)


def _mutate(action, success_message, error_message, refresh=None):
    """Run a write; on success refetch the affected view and rerun."""
    try:
        ok = run_action(action, success_message, error_message)
    except ValidationError as e:
        st.error(f"⚠️ {e}")
        return False
    if ok and refresh is not None:
        key, fetch, fetch_error = refresh
        refresh_view(st.session_state, key, fetch, fetch_error)
    return ok


def _option_index(options, value) -> int:
    """Position of a row's stored value, so edit forms open on it."""
    return options.index(value) if value in options else 0


def _csv_download(df: pd.DataFrame, filename: str, key: str):
    csv = df.to_csv(index=False).encode("utf-8")
    st.download_button("📥 Download as CSV", csv, filename, "text/csv", key=key)


def render_admin_dashboard(cfg: AppConfig, store: DataStore):
    st.title("📊 Admin Panel")

    section = st.sidebar.radio("Admin section", SECTIONS)

    if section == "Dashboard":
        render_overview(store)
    elif section == "Bookings":
        render_bookings(cfg, store)
    elif section == "Customers":
        render_customers(store)
    elif section == "Services":
        render_services(store)
    elif section == "Stocks":
        render_stocks(store)
    elif section == "Vendors":
        render_vendors(store)
    elif section == "Employees":
        render_employees(store)
    elif section == "Inspections":
        render_inspections(cfg)
    elif section == "Revenue":
        render_revenue(store)
    else:
        render_feedback(store)


# ---------------------- DASHBOARD ----------------------

def render_overview(store: DataStore):
    key = "view:dashboard"
    fetch = lambda: fetch_dashboard(store)
    _refresh_button(key, fetch, "Failed to load dashboard")
    data = _view(key, fetch, "Failed to load dashboard")
    if data is None:
        st.info("Dashboard data is unavailable right now.")
        return

    c1, c2, c3, c4 = st.columns(4)
    c1.metric("Active Employees", data.total_employees, f"{data.full_time_employees} FT / {data.part_time_employees} PT")
    c2.metric("Active Bookings", data.active_bookings)
    c3.metric("Monthly Revenue", f"₹{data.monthly_revenue:,.0f}")
    c4.metric("Customers", data.total_customers, f"{data.repeat_customers} repeat")

    left, right = st.columns(2)
    with left:
        st.subheader("Customer Sources")
        if data.customer_sources:
            sources = pd.DataFrame([s.__dict__ for s in data.customer_sources])
            st.plotly_chart(px.pie(sources, names="source", values="count"), use_container_width=True)
        else:
            st.caption("No customer records yet.")
        st.caption(f"Domestic: {data.domestic_customers} · Corporate: {data.corporate_customers}")
    with right:
        st.subheader("Recent Activity")
        for a in data.recent_activities:
            icon = "👤" if a.kind == "employee" else "📅"
            st.markdown(f"{icon} **{a.title}**: {a.description}  \n<small>{a.date[:10]}</small>", unsafe_allow_html=True)


# ---------------------- BOOKINGS ----------------------

def render_bookings(cfg: AppConfig, store: DataStore):
    key = "view:bookings"
    fetch = lambda: bk.fetch_bookings(store)
    _refresh_button(key, fetch, "Failed to fetch bookings")
    bookings = _view(key, fetch, "Failed to fetch bookings", default=[])

    # --- KPI Metrics ---
    col1, col2, col3 = st.columns(3)
    col1.metric("Total Bookings", len(bookings))
    col2.metric("Active", sum(1 for b in bookings if bk.status_of(b) in bk.ACTIVE_STATUSES))
    col3.metric("Completed", sum(1 for b in bookings if bk.status_of(b) == bk.COMPLETED))

    status_filter = st.multiselect("Filter by Status", bk.BOOKING_STATUSES, default=list(bk.BOOKING_STATUSES))
    filtered = bk.filter_by_status(bookings, status_filter)

    if not filtered:
        st.info("No bookings found.")
        return

    inspection_store = JsonFileInspectionStore(cfg.storage.inspections_path)
    crew = _view("view:active_employees", lambda: emp.fetch_active_employees(store), "Failed to fetch employees", default=[])
    crew_names = {e["id"]: f"{e.get('name')} ({e.get('department') or '-'})" for e in crew}

    for b in filtered:
        status = bk.status_of(b)
        with st.expander(f"{b.get('service_name')} · {b.get('customer_name')} · {b.get('booking_date')} {b.get('booking_time')} · {status}"):
            st.write(f"**Email:** {b.get('customer_email') or '-'}  \n**Phone:** {b.get('customer_phone') or '-'}")
            st.write(f"**Address:** {b.get('address') or '-'}")
            if b.get("notes"):
                st.write(f"**Notes:** {b['notes']}")
            st.write(f"**Amount:** ₹{to_amount(b.get('total_amount')):,.0f}")

            actions = bk.next_statuses(status)
            cols = st.columns(len(actions) + 1)
            for i, new_status in enumerate(actions):
                if cols[i].button(new_status, key=f"status-{b['id']}-{new_status}"):
                    ok = _mutate(
                        lambda bid=b["id"], s=new_status: bk.update_booking_status(store, bid, s),
                        "Booking status updated successfully",
                        "Failed to update booking status",
                    )
                    if ok:
                        st.session_state[key] = bk.apply_status(bookings, b["id"], new_status)
                        st.rerun()
            if cols[-1].button("🔍 Schedule Inspection", key=f"inspect-{b['id']}"):
                try:
                    schedule_inspection_from_booking(store, inspection_store, b)
                except DataStoreError as e:
                    logger.error("Error scheduling inspection: %s", e)
                    st.toast("Failed to schedule inspection", icon="⚠️")
                except InspectionStoreError as e:
                    logger.error("Error saving inspection: %s", e)
                    st.toast("Failed to schedule inspection", icon="⚠️")
                else:
                    st.toast("Inspection scheduled successfully!", icon="✅")

            if crew_names and status not in bk.TERMINAL_STATUSES:
                with st.form(f"assign-{b['id']}", clear_on_submit=True):
                    employee_id = st.selectbox(
                        "Assign employee",
                        list(crew_names),
                        index=None,
                        format_func=lambda i: crew_names[i],
                        placeholder="Choose an employee",
                        key=f"assign-employee-{b['id']}",
                    )
                    notes = st.text_input("Assignment notes", key=f"assign-notes-{b['id']}")
                    if st.form_submit_button("👷 Assign Employee"):
                        _mutate(
                            lambda bid=b["id"], e=employee_id, n=notes: bk.assign_employee(store, bid, e, n),
                            "Employee assigned successfully",
                            "Failed to assign employee",
                        )

    display_cols = ["id", "customer_name", "customer_email", "customer_phone", "service_name",
                    "booking_date", "booking_time", "total_amount", "status"]
    df = pd.DataFrame(filtered)
    _csv_download(df[[c for c in display_cols if c in df.columns]], "bookings.csv", "download-bookings")


# ---------------------- CUSTOMERS ----------------------

def render_customers(store: DataStore):
    key = "view:customers"
    fetch = lambda: fetch_customer_summaries(store)
    _refresh_button(key, fetch, "Failed to fetch customer data")
    customers = _view(key, fetch, "Failed to fetch customer data", default=[])

    col1, col2, col3 = st.columns(3)
    col1.metric("Customers", len(customers))
    col2.metric("Registered", sum(1 for c in customers if c.is_registered))
    col3.metric("Total Revenue", f"₹{sum(c.total_spent for c in customers):,.0f}")

    term = st.text_input("Search by name, email or phone")
    shown = sort_for_display(search_customers(customers, term))

    if shown:
        df = pd.DataFrame([c.to_dict() for c in shown])
        display_cols = ["customer_name", "customer_email", "customer_phone", "total_bookings",
                        "total_spent", "last_booking_date", "status", "total_points"]
        st.dataframe(df[display_cols], use_container_width=True, hide_index=True)
        _csv_download(df[display_cols], "customers.csv", "download-customers")
    else:
        st.info("No customers found.")

    c1, c2 = st.columns(2)
    with c1:
        with st.form("add_customer", clear_on_submit=True):
            st.write("### Add Customer")
            name = st.text_input("Name *")
            email = st.text_input("Email *")
            phone = st.text_input("Phone")
            address = st.text_area("Address")
            if st.form_submit_button("Add"):
                _mutate(
                    lambda: add_customer(store, {"customer_name": name, "email": email, "phone_number": phone, "address": address}),
                    "Customer added",
                    "Failed to add customer",
                    refresh=(key, fetch, "Failed to fetch customer data"),
                )
    with c2:
        editable = [c for c in customers if c.customer_email]
        if editable:
            with st.form("edit_customer"):
                st.write("### Edit Customer")
                target = st.selectbox("Customer", editable, format_func=lambda c: f"{c.customer_name} <{c.customer_email}>")
                new_name = st.text_input("New name")
                new_email = st.text_input("New email")
                new_phone = st.text_input("New phone")
                if st.form_submit_button("Save"):
                    updates = {"customer_name": new_name, "email": new_email}
                    if new_phone:
                        updates["phone_number"] = new_phone
                    _mutate(
                        lambda: update_customer(store, target.customer_email, updates),
                        "Customer updated",
                        "Failed to update customer",
                        refresh=(key, fetch, "Failed to fetch customer data"),
                    )

    st.divider()
    render_customer_records(store)


def render_customer_records(store: DataStore):
    st.subheader("📒 Customer Records")
    key = "view:customer_records"
    fetch = lambda: cr.fetch_customer_records(store)
    refresh = (key, fetch, "Failed to fetch customer records")
    _refresh_button(key, fetch, "Failed to fetch customer records")
    records = _view(key, fetch, "Failed to fetch customer records", default=[])

    col1, col2, col3 = st.columns(3)
    col1.metric("Records", len(records))
    col2.metric("Collected", f"₹{sum(to_amount(r.get('amount_paid')) for r in records):,.0f}")
    col3.metric("Outstanding", f"₹{sum(cr.balance_due(r) for r in records):,.0f}")

    term = st.text_input("Search records by name, phone, email, task type or source")
    shown = cr.search_records(records, term)
    if shown:
        df = pd.DataFrame(shown)
        display_cols = ["name", "phone", "email", "booking_date", "task_type", "source", "amount",
                        "amount_paid", "payment_status", "customer_rating", "task_done_by"]
        df = df[[c for c in display_cols if c in df.columns]]
        st.dataframe(df, use_container_width=True, hide_index=True)
        _csv_download(df, "customer_records.csv", "download-customer-records")
    else:
        st.info("No customer records found.")

    crew = _view("view:active_employees", lambda: emp.fetch_active_employees(store), "Failed to fetch employees", default=[])

    with st.form("add_customer_record", clear_on_submit=True):
        st.write("### Add Customer Record")
        c1, c2 = st.columns(2)
        name = c1.text_input("Name *", key="record-name")
        phone = c2.text_input("Phone *", key="record-phone")
        email = c1.text_input("Email", key="record-email")
        booking_date = c2.date_input("Booking date *", value=date.today(), key="record-date")
        address = st.text_area("Address *", key="record-address")
        c3, c4, c5 = st.columns(3)
        task_type = c3.selectbox("Task type", cr.TASK_TYPES, key="record-task-type")
        source = c4.selectbox("Source", cr.SOURCES, key="record-source")
        rating = c5.selectbox("Customer rating", cr.CUSTOMER_RATINGS,
                              index=cr.CUSTOMER_RATINGS.index(cr.DEFAULT_RATING), key="record-rating")
        c6, c7, c8 = st.columns(3)
        amount = c6.number_input("Amount (₹)", min_value=0.0, step=100.0, key="record-amount")
        amount_paid = c7.number_input("Amount paid (₹)", min_value=0.0, step=100.0, key="record-paid")
        discount_points = c8.number_input("Discount points", min_value=0, step=1, key="record-points")
        payment_status = st.selectbox("Payment status", cr.PAYMENT_STATUSES, key="record-payment")
        task_done_by = st.multiselect("Task done by", [e.get("name") for e in crew], key="record-crew")
        customer_notes = st.text_area("Notes", key="record-notes")
        if st.form_submit_button("Add Record"):
            _mutate(
                lambda: cr.add_customer_record(store, {
                    "name": name, "phone": phone, "email": email, "address": address,
                    "booking_date": booking_date, "task_type": task_type, "source": source,
                    "customer_rating": rating, "amount": amount, "amount_paid": amount_paid,
                    "discount_points": discount_points, "payment_status": payment_status,
                    "task_done_by": task_done_by, "customer_notes": customer_notes,
                }),
                "Customer record added successfully",
                "Failed to add customer record",
                refresh=refresh,
            )

    if records:
        by_id = {r["id"]: r for r in records}
        st.write("### Update Payment")
        rid = st.selectbox("Record", list(by_id), format_func=lambda i: f"{by_id[i].get('name')} · {by_id[i].get('booking_date')}",
                           key="payment-record")
        current = by_id[rid]
        with st.form("update_payment"):
            payment_status = st.selectbox(
                "Payment status",
                cr.PAYMENT_STATUSES,
                index=_option_index(cr.PAYMENT_STATUSES, current.get("payment_status") or cr.UNPAID),
                key=f"payment-status-{rid}",
            )
            amount_paid = st.number_input(
                "Amount paid (₹), used when paid in cash",
                min_value=0.0,
                value=to_amount(current.get("amount") or current.get("amount_paid")),
                step=100.0,
                key=f"payment-amount-{rid}",
            )
            if st.form_submit_button("Update Payment"):
                _mutate(
                    lambda: cr.update_payment(store, rid, payment_status, amount_paid),
                    "Payment status updated successfully",
                    "Failed to update payment status",
                    refresh=refresh,
                )


# ---------------------- SERVICES ----------------------

def render_services(store: DataStore):
    key = "view:services"
    fetch = lambda: catalog.fetch_services(store)
    _refresh_button(key, fetch, "Failed to fetch services")
    services = _view(key, fetch, "Failed to fetch services", default=[])
    refresh = (key, fetch, "Failed to fetch services")

    if services:
        st.dataframe(pd.DataFrame(services).drop(columns=["id"], errors="ignore"), use_container_width=True, hide_index=True)

    with st.form("add_service", clear_on_submit=True):
        st.write("### Add Service")
        name = st.text_input("Name *")
        description = st.text_area("Description")
        c1, c2, c3 = st.columns(3)
        price = c1.number_input("Price (₹) *", min_value=0.0, step=100.0)
        duration = c2.number_input("Duration (hours)", min_value=0.0, step=0.5)
        status = c3.selectbox("Status", [catalog.ACTIVE, catalog.INACTIVE])
        if st.form_submit_button("Add Service"):
            _mutate(
                lambda: catalog.add_service(store, {"name": name, "description": description, "price": price,
                                                    "duration_hours": duration or None, "status": status}),
                "Service added successfully",
                "Failed to add service",
                refresh=refresh,
            )

    if services:
        by_id = {s["id"]: s for s in services}
        statuses = [catalog.ACTIVE, catalog.INACTIVE]
        st.write("### Edit / Delete Service")
        sid = st.selectbox("Service", list(by_id), format_func=lambda i: by_id[i]["name"], key="edit-service")
        current = by_id[sid]
        with st.form("edit_service"):
            name = st.text_input("Name", value=current.get("name") or "", key=f"service-name-{sid}")
            price = st.number_input("Price (₹)", min_value=0.0, value=to_amount(current.get("price")), step=100.0,
                                    key=f"service-price-{sid}")
            status = st.selectbox("Status", statuses, index=_option_index(statuses, current.get("status") or catalog.ACTIVE),
                                  key=f"service-status-{sid}")
            c1, c2 = st.columns(2)
            save = c1.form_submit_button("Save")
            delete = c2.form_submit_button("Delete")
        if save:
            _mutate(
                lambda: catalog.update_service(store, sid, {**current, "name": name, "price": price, "status": status}),
                "Service updated successfully",
                "Failed to update service",
                refresh=refresh,
            )
        if delete:
            _mutate(lambda: catalog.delete_service(store, sid), "Service deleted", "Failed to delete service", refresh=refresh)


# ---------------------- STOCKS ----------------------

def render_stocks(store: DataStore):
    key = "view:stocks"
    fetch = lambda: inventory.fetch_stocks(store)
    _refresh_button(key, fetch, "Failed to fetch stock items")
    items = _view(key, fetch, "Failed to fetch stock items", default=[])
    refresh = (key, fetch, "Failed to fetch stock items")

    low = inventory.low_stock_items(items)
    col1, col2, col3 = st.columns(3)
    col1.metric("Items", len(items))
    col2.metric("Low Stock", len(low))
    col3.metric("Stock Value", f"₹{inventory.total_stock_value(items):,.0f}")

    if low:
        st.warning("Low stock: " + ", ".join(f"{i.get('item_name')} ({i.get('quantity')} {i.get('unit')}, min {i.get('minimum_stock')})" for i in low))

    if items:
        df = pd.DataFrame(items)
        df["stock_status"] = ["Low Stock" if inventory.is_low_stock(i) else "In Stock" for i in items]
        st.dataframe(df.drop(columns=["id"], errors="ignore"), use_container_width=True, hide_index=True)

    with st.form("add_stock", clear_on_submit=True):
        st.write("### Add Stock Item")
        item_name = st.text_input("Item name *")
        c1, c2, c3 = st.columns(3)
        category = c1.selectbox("Category", inventory.STOCK_CATEGORIES)
        unit = c2.selectbox("Unit", inventory.STOCK_UNITS)
        supplier = c3.text_input("Supplier")
        c4, c5, c6 = st.columns(3)
        quantity = c4.number_input("Quantity", min_value=0, step=1)
        minimum = c5.number_input("Min stock", min_value=0, step=1)
        cost = c6.number_input("Cost per unit (₹)", min_value=0.0, step=10.0)
        if st.form_submit_button("Add Item"):
            _mutate(
                lambda: inventory.add_stock(store, {"item_name": item_name, "category": category, "unit": unit,
                                                   "supplier": supplier, "quantity": quantity,
                                                   "minimum_stock": minimum, "cost_per_unit": cost}),
                "Stock item added successfully",
                "Failed to add stock item",
                refresh=refresh,
            )

    if items:
        by_id = {i["id"]: i for i in items}
        st.write("### Update / Delete Stock Item")
        sid = st.selectbox("Item", list(by_id), format_func=lambda i: by_id[i]["item_name"], key="edit-stock")
        current = by_id[sid]
        with st.form("edit_stock"):
            quantity = st.number_input("Quantity", min_value=0, value=int(to_amount(current.get("quantity"))), step=1,
                                       key=f"stock-quantity-{sid}")
            c1, c2 = st.columns(2)
            save = c1.form_submit_button("Save")
            delete = c2.form_submit_button("Delete")
        if save:
            _mutate(
                lambda: inventory.update_stock(store, sid, {**current, "quantity": quantity}),
                "Stock item updated successfully",
                "Failed to update stock item",
                refresh=refresh,
            )
        if delete:
            _mutate(lambda: inventory.delete_stock(store, sid), "Stock item deleted successfully",
                    "Failed to delete stock item", refresh=refresh)


# ---------------------- VENDORS ----------------------

def render_vendors(store: DataStore):
    key = "view:vendors"
    fetch = lambda: vnd.fetch_vendors(store)
    _refresh_button(key, fetch, "Failed to fetch vendors")
    vendors = _view(key, fetch, "Failed to fetch vendors", default=[])
    refresh = (key, fetch, "Failed to fetch vendors")

    col1, col2, col3 = st.columns(3)
    col1.metric("Vendors", len(vendors))
    col2.metric("Active", len(vnd.active_vendors(vendors)))
    col3.metric("Average Rating", vnd.average_rating(vendors))

    if vendors:
        st.dataframe(pd.DataFrame(vendors).drop(columns=["id"], errors="ignore"), use_container_width=True, hide_index=True)

    with st.form("add_vendor", clear_on_submit=True):
        st.write("### Add Vendor")
        c1, c2 = st.columns(2)
        name = c1.text_input("Name *")
        contact = c2.text_input("Contact person")
        email = c1.text_input("Email")
        phone = c2.text_input("Phone")
        address = st.text_input("Address")
        services_provided = st.text_input("Services provided (comma separated)")
        c3, c4 = st.columns(2)
        rating = c3.slider("Rating", 0.0, 5.0, 0.0, 0.5)
        status = c4.selectbox("Status", [vnd.ACTIVE, vnd.INACTIVE])
        if st.form_submit_button("Add Vendor"):
            _mutate(
                lambda: vnd.add_vendor(store, {"name": name, "contact_person": contact, "email": email,
                                               "phone_number": phone, "address": address,
                                               "services_provided": services_provided,
                                               "rating": rating, "status": status}),
                "Vendor added successfully",
                "Failed to add vendor",
                refresh=refresh,
            )

    if vendors:
        by_id = {v["id"]: v for v in vendors}
        statuses = [vnd.ACTIVE, vnd.INACTIVE]
        st.write("### Update / Delete Vendor")
        vid = st.selectbox("Vendor", list(by_id), format_func=lambda i: by_id[i]["name"], key="edit-vendor")
        current = by_id[vid]
        with st.form("edit_vendor"):
            status = st.selectbox("Status", statuses, index=_option_index(statuses, current.get("status") or vnd.ACTIVE),
                                  key=f"vendor-status-{vid}")
            rating = st.slider("Rating", 0.0, 5.0, float(to_amount(current.get("rating"))), 0.5, key=f"vendor-rating-{vid}")
            c1, c2 = st.columns(2)
            save = c1.form_submit_button("Save")
            delete = c2.form_submit_button("Delete")
        if save:
            _mutate(
                lambda: vnd.update_vendor(store, vid, {**current, "status": status, "rating": rating}),
                "Vendor updated successfully",
                "Failed to update vendor",
                refresh=refresh,
            )
        if delete:
            _mutate(lambda: vnd.delete_vendor(store, vid), "Vendor deleted successfully",
                    "Failed to delete vendor", refresh=refresh)


# ---------------------- EMPLOYEES ----------------------

def render_employees(store: DataStore):
    key = "view:employees"
    fetch = lambda: emp.fetch_employees(store)
    _refresh_button(key, fetch, "Failed to fetch employees")
    employees = _view(key, fetch, "Failed to fetch employees", default=[])
    refresh = (key, fetch, "Failed to fetch employees")

    counts = emp.headcount(employees)
    col1, col2, col3, col4 = st.columns(4)
    col1.metric("Active", counts.active)
    col2.metric("Inactive", counts.inactive)
    col3.metric("Full-time", counts.full_time)
    col4.metric("Part-time", counts.part_time)

    term = st.text_input("Search employees")
    shown = emp.search_employees(employees, term)
    if shown:
        st.dataframe(pd.DataFrame(shown).drop(columns=["id"], errors="ignore"), use_container_width=True, hide_index=True)

    with st.form("add_employee", clear_on_submit=True):
        st.write("### Add Employee")
        c1, c2 = st.columns(2)
        name = c1.text_input("Name *")
        position = c2.text_input("Position *")
        department = c1.selectbox("Department", emp.DEPARTMENTS)
        employment_type = c2.selectbox("Employment type", [emp.FULL_TIME, emp.PART_TIME])
        email = c1.text_input("Email")
        phone = c2.text_input("Phone")
        salary = c1.number_input("Salary (₹)", min_value=0.0, step=1000.0)
        hire_date = c2.date_input("Hire date", value=date.today())
        if st.form_submit_button("Add Employee"):
            _mutate(
                lambda: emp.add_employee(store, {"name": name, "position": position, "department": department,
                                                 "employment_type": employment_type, "email": email,
                                                 "phone_number": phone, "salary": salary, "hire_date": hire_date}),
                "Employee added successfully",
                "Failed to add employee",
                refresh=refresh,
            )

    if employees:
        by_id = {e["id"]: e for e in employees}
        statuses = [emp.ACTIVE, emp.INACTIVE]
        st.write("### Update / Delete Employee")
        eid = st.selectbox("Employee", list(by_id), format_func=lambda i: by_id[i]["name"], key="edit-employee")
        current = by_id[eid]
        with st.form("edit_employee"):
            status = st.selectbox("Status", statuses, index=_option_index(statuses, current.get("status") or emp.ACTIVE),
                                  key=f"employee-status-{eid}")
            salary = st.number_input("Salary (₹)", min_value=0.0, value=to_amount(current.get("salary")), step=1000.0,
                                     key=f"employee-salary-{eid}")
            c1, c2 = st.columns(2)
            save = c1.form_submit_button("Save")
            delete = c2.form_submit_button("Delete")
        if save:
            _mutate(
                lambda: emp.update_employee(store, eid, {**current, "status": status, "salary": salary}),
                "Employee updated successfully",
                "Failed to update employee",
                refresh=refresh,
            )
        if delete:
            _mutate(lambda: emp.delete_employee(store, eid), "Employee deleted successfully",
                    "Failed to delete employee", refresh=refresh)


# ---------------------- INSPECTIONS ----------------------

def render_inspections(cfg: AppConfig):
    inspection_store = JsonFileInspectionStore(cfg.storage.inspections_path)
    try:
        records = load_inspections(inspection_store)
    except InspectionStoreError as e:
        logger.error("Error fetching inspections: %s", e)
        st.toast("Failed to fetch inspections", icon="⚠️")
        records = []

    with st.form("add_inspection", clear_on_submit=True):
        st.write("### Add New Inspection Record")
        c1, c2 = st.columns(2)
        customer_name = c1.text_input("Customer name *")
        phone = c2.text_input("Phone number *")
        address = st.text_area("Address *")
        service_name = c1.text_input("Service type")
        inspected_by = c2.text_input("Inspected by")
        inspection_date = c1.date_input("Date", value=date.today())
        time_taken = c2.text_input("Time taken")
        notes = st.text_area("Notes")
        status = st.selectbox("Status", INSPECTION_STATUSES)
        if st.form_submit_button("Save Inspection"):
            try:
                add_inspection(inspection_store, {
                    "customer_name": customer_name, "phone_number": phone, "address": address,
                    "service_name": service_name, "inspected_by": inspected_by,
                    "date": inspection_date.isoformat(), "time_taken": time_taken,
                    "notes": notes, "status": status,
                })
            except ValidationError as e:
                st.error(f"⚠️ {e}")
            except InspectionStoreError as e:
                logger.error("Error adding inspection: %s", e)
                st.toast("Failed to add inspection record", icon="⚠️")
            else:
                st.toast("Inspection record added successfully", icon="✅")
                st.rerun()

    if not records:
        st.info("No inspection records yet.")
        return

    for r in records:
        with st.expander(f"{r.customer_name} · {r.scheduled_date or r.date or '-'} · {r.status}"):
            st.write(f"**Address:** {r.address}  \n**Phone:** {r.phone_number}")
            if r.service_name:
                st.write(f"**Service:** {r.service_name}")
            if r.booking_id:
                st.caption(f"From booking {r.booking_id}")
            c1, c2 = st.columns([3, 1])
            new_status = c1.selectbox("Status", INSPECTION_STATUSES, index=_option_index(INSPECTION_STATUSES, r.status),
                                      key=f"insp-status-{r.id}")
            try:
                if new_status != r.status:
                    update_inspection_status(inspection_store, r.id, new_status)
                    st.toast("Inspection status updated", icon="✅")
                    st.rerun()
                if c2.button("🗑 Remove", key=f"insp-remove-{r.id}"):
                    remove_inspection(inspection_store, r.id)
                    st.toast("Inspection record removed", icon="✅")
                    st.rerun()
            except InspectionStoreError as e:
                logger.error("Error updating inspection: %s", e)
                st.toast("Failed to update inspection", icon="⚠️")


# ---------------------- REVENUE ----------------------

def render_revenue(store: DataStore):
    key = "view:bookings"
    fetch = lambda: bk.fetch_bookings(store)
    _refresh_button(key, fetch, "Failed to fetch bookings")
    bookings = _view(key, fetch, "Failed to fetch bookings", default=[])

    day = st.date_input("Day", value=date.today())
    st.metric("Booking revenue on this day", f"₹{daily_revenue(bookings, day):,.0f}")

    series = monthly_revenue_series(bookings)
    if not series.empty:
        st.plotly_chart(px.bar(series, x="month", y="revenue", hover_data=["bookings"], title="Monthly Revenue"),
                        use_container_width=True)
    breakdown = status_breakdown(bookings)
    if not breakdown.empty:
        st.plotly_chart(px.pie(breakdown, names="status", values="count", title="Bookings by Status"),
                        use_container_width=True)

    st.divider()
    st.subheader("Accounts")
    month = st.text_input("Month (YYYY-MM)", value=date.today().strftime("%Y-%m"))
    accounts_key = f"view:accounts:{month}"
    try:
        accounts = _view(accounts_key, lambda: fetch_accounts(store, month), "Failed to fetch accounts data")
    except ValidationError as e:
        st.error(f"⚠️ {e}")
        return
    if accounts is None:
        return

    c1, c2, c3 = st.columns(3)
    c1.metric("Booking Revenue", f"₹{accounts.total_revenue:,.0f}", f"{accounts.total_bookings} bookings")
    c2.metric("Customer Records Paid", f"₹{accounts.customer_records_paid:,.0f}",
              f"₹{accounts.outstanding:,.0f} outstanding", delta_color="inverse")
    c3.metric("Stock Value", f"₹{accounts.stock_value:,.0f}")
    _csv_download(pd.DataFrame([accounts.__dict__]), f"accounts-{month}.csv", "download-accounts")


# ---------------------- FEEDBACK ----------------------

def render_feedback(store: DataStore):
    key = "view:feedback"
    fetch = lambda: fetch_feedback(store)
    _refresh_button(key, fetch, "Failed to fetch feedback")
    feedback = _view(key, fetch, "Failed to fetch feedback", default=[])

    col1, col2 = st.columns(2)
    col1.metric("Reviews", len(feedback))
    col2.metric("Average Rating", f"{average_feedback_rating(feedback)} ⭐")

    if not feedback:
        st.info("No feedback yet.")
        return
    display_cols = ["customer_name", "service_name", "rating", "comment", "created_at"]
    df = pd.DataFrame(feedback)
    st.dataframe(df[[c for c in display_cols if c in df.columns]], use_container_width=True, hide_index=True)
