"""timetrack package.

Feature modules (employees, schedules, time_entries, absences, reports, ...)
each keep their own model / repository / service / controller layers; the
Flask wiring lives in ``main.create_app``.
"""
