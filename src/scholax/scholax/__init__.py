"""ScholaX package.

This package is organized by feature modules (users, students, teachers,
attendance) with a thin Flask controller layer over service/repository layers.
"""
