"""Lab Attendance package.

Organized by feature modules (students, sessions, attendance, qr, users)
with a thin Flask controller layer over service/repository layers.
"""
