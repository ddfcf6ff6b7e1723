"""LED Driver Calculator — Entry Point."""
import sys
from app.application import configure_logging, create_application, default_database_path
from app.main_window import MainWindow


def main():
    configure_logging()
    app = create_application(sys.argv)
    window = MainWindow(db_path=default_database_path())
    window.show()
    sys.exit(app.exec())


if __name__ == "__main__":
    main()
