"""
Scheduling Domain

Appointments, the agenda day grid and doctor schedule settings.

- slots.py       slot generation from unit hours and visit duration
- overlap.py     which appointments/blocks fall in a slot
- reschedule.py  agenda board and the drag-and-drop move transaction
- agenda.py      day grid assembly
- repository.py  database access (appointments, configs, blocks)
- service.py     business rules and error mapping
- router.py      HTTP endpoints
"""
