"""HRIS portal package.

Feature modules (users, attendance, requests, schedules, reports, ...) each own
a repository Protocol with its MySQL implementation, a service layer and a thin
Flask controller. ``main.create_app`` wires them together.
"""
