"""Tests for customer and technician registration and lookups."""

import pytest

from fieldservice.errors import ConflictError, NotFoundError

from conftest import at, make_customer


class TestCustomers:
    def test_create_and_fetch(self, customer_service):
        created = make_customer(customer_service, "John Smith", "john.smith@example.com")

        fetched = customer_service.get_customer_by_id(created.id)
        assert fetched.name == "John Smith"
        assert fetched.email == "john.smith@example.com"
        assert fetched.jobs == []

    def test_duplicate_email_conflicts(self, customer_service):
        make_customer(customer_service, email="dup@example.com")
        with pytest.raises(ConflictError, match="Customer with this email already exists"):
            make_customer(customer_service, "Someone Else", email="dup@example.com")
        assert len(customer_service.get_all_customers()) == 1

    def test_missing_customer(self, customer_service):
        with pytest.raises(NotFoundError, match="Customer not found"):
            customer_service.get_customer_by_id(404)

    def test_list_newest_first_with_counts(self, customer_service):
        first = make_customer(customer_service, "First")
        second = make_customer(customer_service, "Second")
        listed = customer_service.get_all_customers()
        assert [c.id for c in listed] == [second.id, first.id]
        assert all(c.job_count == 0 for c in listed)


class TestTechnicians:
    def test_detail_lists_appointments_by_start(self, technician_service, job_service, customer, technician):
        late = job_service.create_job(customer.id, "Late", "desc")
        early = job_service.create_job(customer.id, "Early", "desc")
        job_service.create_appointment(late.id, technician.id, at(14), at(15))
        job_service.create_appointment(early.id, technician.id, at(8), at(9))

        detail = technician_service.get_technician_by_id(technician.id)
        assert [a.job_id for a in detail.appointments] == [early.id, late.id]

        summary = technician_service.get_all_technicians()
        assert summary[0].appointment_count == 2

    def test_missing_technician(self, technician_service):
        with pytest.raises(NotFoundError, match="Technician not found"):
            technician_service.get_technician_by_id(3)
