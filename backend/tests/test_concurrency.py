"""Racing bookings for the same doctor slot."""
import threading

from telecare import schemas
from telecare.errors import SlotConflict, SlotUnavailable

from conftest import MONDAY


def _run_concurrently(count, target):
    results = []
    lock = threading.Lock()

    def worker(index):
        try:
            outcome = target(index)
        except (SlotConflict, SlotUnavailable) as error:
            outcome = error
        with lock:
            results.append(outcome)

    threads = [threading.Thread(target=worker, args=(i,)) for i in range(count)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join(timeout=10)
    return results


def test_double_booking_after_both_listed_the_slot(services, book, monkeypatch):
    """Both requests see the slot open; exactly one commits."""
    listed = threading.Barrier(2, timeout=5)
    original = services.availability.open_slots

    def open_slots_then_wait(doctor_id, day):
        slots = original(doctor_id, day)
        listed.wait()
        return slots

    monkeypatch.setattr(services.availability, "open_slots", open_slots_then_wait)

    results = _run_concurrently(2, lambda i: book(patient_id=f"p-{i}"))

    booked = [item for item in results if isinstance(item, schemas.Appointment)]
    conflicts = [item for item in results if isinstance(item, SlotConflict)]
    assert len(booked) == 1
    assert len(conflicts) == 1
    active = services.ledger.find(
        doctor_id="dr-a", day=MONDAY, statuses=schemas.ACTIVE_STATUSES
    )
    assert [record.id for record in active] == [booked[0].id]


def test_many_racing_bookings_leave_one_record(services, book):
    results = _run_concurrently(12, lambda i: book(patient_id=f"p-{i}"))

    booked = [item for item in results if isinstance(item, schemas.Appointment)]
    assert len(results) == 12
    assert len(booked) == 1
    assert len(services.ledger.find(doctor_id="dr-a", day=MONDAY, statuses=schemas.ACTIVE_STATUSES)) == 1
    assert services.list_open_slots("dr-a", MONDAY) == ["10:00"]
