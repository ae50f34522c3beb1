#!/usr/bin/env python3
"""
Demo scenario for the Registrar records engine.
"""

import sys
import os
import shutil
import tempfile

# Add the project root to the Python path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from registrar.config import RegistrarConfig
from registrar.core.enums import Grade
from registrar.core.exceptions import CreditLimitExceededError, DuplicateEnrollmentError, NotEnrolledError
from registrar.main import RegistrarPlatform


def run_demo():
    """Walk through enrollment, grading, export and backup/restore."""
    print("=" * 60)
    print("REGISTRAR ACADEMIC RECORDS ENGINE - DEMO")
    print("=" * 60)

    workdir = tempfile.mkdtemp(prefix="registrar_demo_")
    config = RegistrarConfig(
        max_credits_per_semester=9,
        data_directory=os.path.join(workdir, "data"),
        backup_directory=os.path.join(workdir, "backups"),
    )
    platform = RegistrarPlatform(config)

    try:
        print("\n1. Creating sample data...")
        create_sample_data(platform)

        print("\n2. Demonstrating enrollment rules...")
        demonstrate_enrollment(platform)

        print("\n3. Demonstrating grading...")
        demonstrate_grading(platform)

        print("\n4. Demonstrating export and backups...")
        demonstrate_persistence(platform)

        print("\n" + "=" * 60)
        print("DEMO COMPLETED SUCCESSFULLY!")
        print("=" * 60)

    finally:
        shutil.rmtree(workdir, ignore_errors=True)


def create_sample_data(platform):
    records = platform.records_service
    catalog = platform.catalog

    records.create_student("S001", "John Doe", "john@example.com", "2023CSE001", 2, "Computer Science")
    records.create_student("S002", "Jane Smith", "jane@example.com", "2022MTH014", 3, "Mathematics")
    print(f"  Created {records.get_student_count()} students")

    catalog.create_course("CS101", "CS101", "Intro to Programming", "Basics", 3, "Computer Science", "Fall",
                          max_enrollment=1)
    catalog.create_course("CS201", "CS201", "Data Structures", "Lists, trees, graphs", 4, "Computer Science", "Fall")
    catalog.create_course("MATH201", "MATH201", "Linear Algebra", "Matrices", 4, "Mathematics", "Fall")
    print(f"  Created {catalog.get_course_count()} courses")


def demonstrate_enrollment(platform):
    records = platform.records_service
    catalog = platform.catalog

    cs101 = catalog.get_course("CS101")
    print(f"  Enroll S001 in CS101: {records.enroll_student_in_course('S001', cs101)}")
    print(f"  Enroll S002 in full CS101: {records.request_enrollment('S002', cs101).message}")

    try:
        records.enroll_student_in_course("S001", cs101)
    except DuplicateEnrollmentError as e:
        print(f"  Duplicate enrollment rejected: {e}")

    records.enroll_student_in_course("S001", catalog.get_course("CS201"))
    try:
        records.enroll_student_in_course("S001", catalog.get_course("MATH201"))
    except CreditLimitExceededError as e:
        print(f"  Credit limit enforced: {e}")


def demonstrate_grading(platform):
    records = platform.records_service

    records.assign_grade("S001", "CS101", Grade.A)
    records.assign_grade("S001", "CS201", Grade.B)
    try:
        records.assign_grade("S001", "MATH201", Grade.S)
    except NotEnrolledError as e:
        print(f"  Grading rejected: {e}")

    print()
    print(records.generate_transcript("S001"))


def demonstrate_persistence(platform):
    records = platform.records_service
    files = platform.file_service
    backups = platform.backup_manager

    files.export_students_to_csv(records.get_all_students(), "students.csv")
    files.export_courses_to_csv(platform.catalog.get_all_courses(), "courses.csv")

    backup_path = backups.create_backup()
    backup_name = os.path.basename(backup_path)
    print(f"  Backup {backup_name}: {backups.count_backup_files(backup_name)} files, "
          f"{backups.get_backup_size(backup_name)} bytes")

    os.remove(files.resolve("students.csv"))
    backups.restore_from_backup(backup_name)

    imported = files.import_students_from_csv("students.csv")
    print(f"  Restored and re-imported {len(imported)} students")


if __name__ == "__main__":
    run_demo()
