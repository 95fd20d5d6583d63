"""Allow running StudyScrum as a module: python -m studyscrum."""

import logging
import os
import sys

from PyQt6.QtWidgets import QApplication

from .database.db import init_db
from .app import StudyScrumApp


def main() -> None:
    logging.basicConfig(
        level=os.environ.get("STUDYSCRUM_LOG_LEVEL", "INFO").upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    init_db()
    logging.getLogger("studyscrum").info("StudyScrum ready!")

    app = QApplication(sys.argv)
    app.setApplicationName("StudyScrum")
    app.setOrganizationName("StudyScrum")

    window = StudyScrumApp()
    window.show()

    sys.exit(app.exec())


if __name__ == "__main__":
    main()
