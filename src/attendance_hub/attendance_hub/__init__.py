"""Attendance Hub package.

Feature modules (roster, attendance, branches, presence, qr) keep the
attendance rules in pure service code; a thin Flask controller layer and
HTTP repositories talk to the school's remote backend.
"""
