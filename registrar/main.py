"""
Main entry point for the Registrar records engine.
"""

import argparse
import logging
import os
import threading
import time
from typing import Optional

from .config import RegistrarConfig, load_config
from .core.enums import Grade
from .core.exceptions import RegistrarException
from .persistence import BackupManager, FileService
from .services import CourseCatalog, RecordsService
from .api.rest_api import RegistrarRestAPI

logger = logging.getLogger(__name__)


class RegistrarPlatform:
    """Wires configuration, services, persistence and the REST API together."""

    def __init__(self, config: Optional[RegistrarConfig] = None):
        self._config = config or RegistrarConfig()
        self._rest_thread: Optional[threading.Thread] = None

        self._initialize_platform()

    def _initialize_platform(self):
        """Initialize the platform with all services."""
        logger.info("Initializing Registrar platform with %s", self._config)

        self._ensure_directories()

        self.catalog = CourseCatalog(self._config)
        self.records_service = RecordsService(self._config, self.catalog)
        self.file_service = FileService(self._config)
        self.backup_manager = BackupManager(self._config)
        logger.info("Services initialized")

        self.rest_api = RegistrarRestAPI(self.records_service, self.backup_manager)
        logger.info("REST API initialized")

    def _ensure_directories(self) -> None:
        for directory in (self._config.data_directory, self._config.backup_directory):
            try:
                os.makedirs(directory, exist_ok=True)
            except OSError as e:
                logger.warning("Failed to create directory %s: %s", directory, e)

    @property
    def config(self) -> RegistrarConfig:
        return self._config

    def start_rest_server(self, host: str = "127.0.0.1", port: int = 8000):
        """Start the REST server in a background thread."""
        if self._rest_thread is not None:
            logger.info("REST server already running")
            return

        import uvicorn

        def run_server():
            uvicorn.run(
                self.rest_api.app,
                host=host,
                port=port,
                log_level="info"
            )

        self._rest_thread = threading.Thread(target=run_server, daemon=True)
        self._rest_thread.start()

        logger.info("REST server started on %s:%d (docs at http://%s:%d/docs)", host, port, host, port)

    def create_sample_data(self):
        """Create sample data for demonstration."""
        instructor = self.catalog.create_instructor(
            "I001", "Dr. Ada Lovelace", "ada@university.edu", "EMP001",
            "Computer Science", specialization="Algorithms",
        )
        cs101 = self.catalog.create_course(
            "CS101", "CS101", "Introduction to Programming",
            "Basic concepts of computer science and programming",
            3, "Computer Science", "Fall", instructor_id=instructor.id,
        )
        self.catalog.create_course(
            "MATH201", "MATH201", "Linear Algebra", "Vectors, matrices and linear maps",
            4, "Mathematics", "Fall",
        )

        students = [
            ("S001", "John Doe", "john@example.com", "2023CSE001", 2, "Computer Science"),
            ("S002", "Jane Smith", "jane@example.com", "2022MTH014", 3, "Mathematics"),
            ("S003", "Carol Davis", "carol@example.com", "2024CSE027", 1, "Computer Science"),
        ]
        for student_args in students:
            self.records_service.create_student(*student_args)

        self.records_service.enroll_student_in_course("S001", cs101)
        self.records_service.assign_grade("S001", "CS101", Grade.A)

    def run_demo(self):
        """Run a demonstration of the platform."""
        print("Running Registrar demonstration...")

        self.create_sample_data()

        print("\n=== Transcript ===")
        print(self.records_service.generate_transcript("S001"))

        print("=== Enrollment Statistics ===")
        for key, value in self.records_service.get_enrollment_statistics().items():
            print(f"{key}: {value}")

        students_path = self.file_service.export_students_to_csv(
            self.records_service.get_all_students(), "students.csv")
        courses_path = self.file_service.export_courses_to_csv(
            self.catalog.get_all_courses(), "courses.csv")
        print(f"\nExported {students_path} and {courses_path}")

        backup_path = self.backup_manager.create_backup()
        print(f"Backup created at {backup_path}")
        print(f"Available backups: {self.backup_manager.list_backups()}")


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(description="Registrar Academic Records Engine")
    parser.add_argument("--host", type=str, default="127.0.0.1", help="REST server host")
    parser.add_argument("--port", type=int, default=8000, help="REST server port")
    parser.add_argument("--demo", action="store_true", help="Run demo mode")
    parser.add_argument("--config", type=str, help="Path to a .properties configuration file")
    parser.add_argument("--log-level", type=str, default="INFO", help="Logging level")

    args = parser.parse_args()

    logging.basicConfig(
        level=getattr(logging, args.log_level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    platform = RegistrarPlatform(load_config(args.config))

    try:
        if args.demo:
            platform.run_demo()
        else:
            platform.start_rest_server(args.host, args.port)

            # Keep running
            print("\nRegistrar is running. Press Ctrl+C to stop.")
            while True:
                time.sleep(1)

    except RegistrarException as e:
        logger.error("Registrar error: %s", e)
        raise SystemExit(1)
    except KeyboardInterrupt:
        print("\nShutting down...")


if __name__ == "__main__":
    main()
