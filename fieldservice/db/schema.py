# fieldservice/db/schema.py

from sqlalchemy import (
    MetaData, Table, Column, Integer, String,
    Numeric, DateTime, ForeignKey, CheckConstraint, Text, Index
)

metadata = MetaData()

customers = Table(
    "customers",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("name", String, nullable=False),
    Column("phone", String, nullable=False),
    Column("email", String, nullable=False, unique=True),
    Column("address", Text, nullable=False),
    Column("created_at", DateTime, nullable=False),
)

technicians = Table(
    "technicians",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("name", String, nullable=False),
    Column("created_at", DateTime, nullable=False),
)

jobs = Table(
    "jobs",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("title", String, nullable=False),
    Column("description", Text, nullable=False),
    Column("customer_id", Integer, ForeignKey("customers.id"), nullable=False),
    Column("status", String, nullable=False),
    Column("created_at", DateTime, nullable=False),
    CheckConstraint(
        "status IN ('New', 'Scheduled', 'Done', 'Invoiced', 'Paid')",
        name="ck_jobs_status",
    ),
)

appointments = Table(
    "appointments",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("job_id", Integer, ForeignKey("jobs.id"), nullable=False, unique=True),
    Column("technician_id", Integer, ForeignKey("technicians.id"), nullable=False),
    Column("start_time", DateTime, nullable=False),
    Column("end_time", DateTime, nullable=False),
    Column("created_at", DateTime, nullable=False),
    CheckConstraint("end_time > start_time", name="ck_appointments_window"),
)

Index("ix_appointments_technician", appointments.c.technician_id, appointments.c.start_time)

invoices = Table(
    "invoices",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("job_id", Integer, ForeignKey("jobs.id"), nullable=False, unique=True),
    Column("subtotal", Numeric(18, 2), nullable=False),
    Column("tax", Numeric(18, 2), nullable=False),
    Column("total", Numeric(18, 2), nullable=False),
    Column("balance", Numeric(18, 2), nullable=False),
    Column("created_at", DateTime, nullable=False),
    CheckConstraint("subtotal >= 0", name="ck_invoices_subtotal_nonneg"),
    CheckConstraint("balance >= 0", name="ck_invoices_balance_nonneg"),
)

line_items = Table(
    "line_items",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("invoice_id", Integer, ForeignKey("invoices.id"), nullable=False),
    Column("description", Text, nullable=False),
    Column("quantity", Integer, nullable=False),
    Column("unit_price", Numeric(18, 2), nullable=False),
    Column("total", Numeric(18, 2), nullable=False),
    CheckConstraint("quantity > 0", name="ck_line_items_quantity_pos"),
    CheckConstraint("unit_price > 0", name="ck_line_items_unit_price_pos"),
)

payments = Table(
    "payments",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("invoice_id", Integer, ForeignKey("invoices.id"), nullable=False),
    Column("amount", Numeric(18, 2), nullable=False),
    Column("method", String, nullable=False),
    Column("created_at", DateTime, nullable=False),
    CheckConstraint("amount > 0", name="ck_payments_amount_pos"),
    CheckConstraint("method IN ('card', 'cash', 'check')", name="ck_payments_method"),
)

job_activities = Table(
    "job_activities",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("job_id", Integer, ForeignKey("jobs.id"), nullable=False),
    Column("action", String, nullable=False),
    Column("details", Text, nullable=False),
    Column("created_at", DateTime, nullable=False),
)
