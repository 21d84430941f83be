# db/models.py
"""
Supabase does not require ORM model classes.
Tables live in the Supabase project; the columns this app reads and writes:

Table: bookings
- id (uuid, PK)
- user_id (uuid, nullable → auth user)
- customer_name, customer_email (text)
- customer_phone (text, nullable)
- service_id (uuid, nullable → services.id)
- service_name (text)
- booking_date (date), booking_time (text HH:MM)
- address (text), notes (text, nullable)
- total_amount (numeric, nullable)
- status (text: Pending / Confirmed / In Progress / Completed / Cancelled)
- created_at, updated_at (timestamp)

Table: user_profiles
- id (uuid, PK = auth user id)
- first_name, last_name, phone_number (text, nullable)
- email_verified (bool), role (text: admin / customer)

Table: customer_points
- user_id (uuid), total_points, points_earned, points_redeemed (int)

Table: customer_records
- name, phone, email, address, booking_date
- task_type (text), source (text)
- amount, amount_paid, discount_points (numeric)
- payment_status, customer_notes, customer_rating (text)
- task_done_by (text[])

Table: services
- name, description (text), price (numeric), duration_hours (numeric)
- status (text: Active / Inactive)

Table: stocks
- item_name, category, unit, supplier (text)
- quantity, minimum_stock (int), cost_per_unit, total_value (numeric)

Table: vendors
- name, contact_person, email, phone_number, address (text)
- services_provided (text[]), rating (numeric), status (text)

Table: employees
- name, department, position, email, phone_number (text)
- salary (numeric), hire_date (date)
- employment_type (text: full-time / part-time), status (text)

Table: feedback
- booking_id, customer_name, customer_email, service_name (text)
- rating (int 1-5), comment (text, nullable)

Table: task_assignments
- booking_id (uuid → bookings.id), employee_id (uuid → employees.id)
- status (text: Assigned), notes (text, nullable)
- assigned_date, created_at, updated_at (timestamp)
"""

BOOKINGS = "bookings"
USER_PROFILES = "user_profiles"
CUSTOMER_POINTS = "customer_points"
CUSTOMER_RECORDS = "customer_records"
SERVICES = "services"
STOCKS = "stocks"
VENDORS = "vendors"
EMPLOYEES = "employees"
FEEDBACK = "feedback"
TASK_ASSIGNMENTS = "task_assignments"
