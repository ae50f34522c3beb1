"""
Registrar: Academic Records Engine

Tracks students, instructors, courses, enrollments and grades for a single
institution, enforces the enrollment and grading rules, and keeps CSV exports
and timestamped backups of the data directory.
"""

__version__ = "1.0.0"
__author__ = "Registrar Development Team"
__description__ = "Academic Records Engine"
