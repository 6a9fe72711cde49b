import logging
import os
import sys

from PySide6 import QtWidgets

from serialterm.ui.main_window import MainWindow
from serialterm.version import APP_NAME


def main():
    logging.basicConfig(
        level=os.environ.get("SERIALTERM_LOG_LEVEL", "INFO").upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    app = QtWidgets.QApplication(sys.argv)
    app.setApplicationName(APP_NAME)
    app.setOrganizationName(APP_NAME)

    win = MainWindow()
    win.show()
    sys.exit(app.exec())


if __name__ == '__main__':
    main()
