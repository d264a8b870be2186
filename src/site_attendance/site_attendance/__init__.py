"""Site Attendance package.

This package is organized by feature modules (attendance, wfh, leaves, sites,
users, reports) with a thin Flask controller layer and service/repository layers.
"""
