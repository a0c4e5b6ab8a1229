"""The demo seed goes through the services and leaves one booked job."""

from datetime import datetime

from fieldservice.models.jobs import JobStatus
from scripts.seed import seed


def test_seed_loads_demo_data(gateway, job_service, technician_service):
    result = seed(gateway, now=datetime(2024, 3, 1, 15, 30))

    assert [c.name for c in result["customers"]] == ["John Smith", "Sarah Johnson", "Mike Williams"]
    assert [t.name for t in result["technicians"]] == ["Taylor"]

    statuses = sorted(job.status.value for job in job_service.get_all_jobs())
    assert statuses == ["New", "New", "Scheduled"]

    booked = job_service.get_all_jobs(JobStatus.SCHEDULED)[0]
    assert booked.title == "Electrical Inspection"
    assert booked.appointment.start_time == datetime(2024, 3, 2, 10, 0)
    assert booked.appointment.end_time == datetime(2024, 3, 2, 12, 0)

    taylor = technician_service.get_technician_by_id(result["technicians"][0].id)
    assert len(taylor.appointments) == 1


def test_init_db_reset_recreates_tables(engine, gateway, monkeypatch, technician_service):
    import scripts.init_db as init_db

    technician_service.create_technician("Leftover")
    monkeypatch.setattr(init_db, "get_engine", lambda: engine)

    init_db.main(["--reset"])

    assert technician_service.get_all_technicians() == []
