"""
Main user interface for the ISO8583 Viewer application.
"""
import sys
from typing import Optional

from PySide6.QtWidgets import (
    QApplication, QMainWindow, QWidget, QVBoxLayout, QHBoxLayout,
    QSplitter, QTextEdit, QPushButton, QLabel, QCheckBox, QGroupBox,
    QTreeWidget, QTreeWidgetItem, QHeaderView, QStatusBar
)
from PySide6.QtCore import Qt
from PySide6.QtGui import QFont

import app_config
from .cli import render_text
from .errors import ISO8583Error
from .hexutil import clean_message
from .iso_parser import ParsedMessage, parse


SAMPLE_MESSAGE = "01002000000000000000930000"
SAMPLE_WITH_HEADER = "0012600008000001002000000000000000930000"


class ISOMainWindow(QMainWindow):
    """Main window: message input, decode options and result tree."""

    def __init__(self):
        super().__init__()
        self.result: Optional[ParsedMessage] = None
        self.last_error: Optional[str] = None
        self.setWindowTitle("ISO8583 Message Parser")
        self.resize(1000, 700)
        self._init_ui()
        self._apply_config_defaults()

    def _init_ui(self):
        central = QWidget()
        layout = QVBoxLayout(central)

        options = QGroupBox("Options")
        opt_layout = QHBoxLayout(options)
        self.header_check = QCheckBox("The message includes length header")
        self.tpdu_check = QCheckBox("TPDU header")
        self.tlv_check = QCheckBox("Parse Private TLV")
        self.ltv_check = QCheckBox("Parse Private LTV")
        self.emv_check = QCheckBox("Decode ICC data (field 55)")
        for box in (self.header_check, self.tpdu_check, self.tlv_check, self.ltv_check, self.emv_check):
            opt_layout.addWidget(box)
        opt_layout.addStretch()
        # TLV and LTV exclude each other
        self.tlv_check.toggled.connect(lambda on: on and self.ltv_check.setChecked(False))
        self.ltv_check.toggled.connect(lambda on: on and self.tlv_check.setChecked(False))
        layout.addWidget(options)

        layout.addWidget(QLabel("Enter the message:"))
        hint = QLabel(
            f"(e.g. '{SAMPLE_MESSAGE}', or '{SAMPLE_WITH_HEADER}' with length header and TPDU)"
        )
        hint.setStyleSheet("color: gray;")
        layout.addWidget(hint)

        splitter = QSplitter(Qt.Vertical)

        self.message_edit = QTextEdit()
        self.message_edit.setAcceptRichText(False)
        self.message_edit.setPlaceholderText("Enter ISO8583 message here")
        splitter.addWidget(self.message_edit)

        self.result_tree = QTreeWidget()
        self.result_tree.setHeaderLabels(["Field", "Name", "Length", "Value"])
        self.result_tree.header().setSectionResizeMode(QHeaderView.ResizeToContents)
        splitter.addWidget(self.result_tree)

        self.output_text = QTextEdit()
        self.output_text.setReadOnly(True)
        mono = QFont("Courier New")
        mono.setStyleHint(QFont.Monospace)
        self.output_text.setFont(mono)
        splitter.addWidget(self.output_text)
        splitter.setSizes([150, 350, 200])

        button_row = QHBoxLayout()
        self.parse_button = QPushButton("Parse Message")
        self.parse_button.clicked.connect(self.parse_message)
        self.clear_button = QPushButton("Clear")
        self.clear_button.clicked.connect(self.clear)
        button_row.addWidget(self.parse_button)
        button_row.addWidget(self.clear_button)
        button_row.addStretch()

        layout.addLayout(button_row)
        layout.addWidget(splitter, 1)

        self.setCentralWidget(central)
        self.setStatusBar(QStatusBar())

    def _apply_config_defaults(self):
        opts = app_config.parse_options(app_config.load_config())
        self.header_check.setChecked(opts["including_header_length"])
        self.tpdu_check.setChecked(opts["tpdu"])
        self.tlv_check.setChecked(opts["tlv_private"])
        self.ltv_check.setChecked(opts["ltv_private"])
        self.emv_check.setChecked(opts["emv"])

    def parse_message(self) -> bool:
        """Decode the message box contents and show the result."""
        message = clean_message(self.message_edit.toPlainText())
        if not message:
            return False
        try:
            result = parse(
                message,
                self.header_check.isChecked(),
                self.tlv_check.isChecked(),
                self.ltv_check.isChecked(),
                tpdu=self.tpdu_check.isChecked(),
                emv=self.emv_check.isChecked(),
            )
        except ISO8583Error as e:
            self.show_error(str(e))
            return False
        self.show_result(result)
        return True

    def show_result(self, result: ParsedMessage):
        self.result = result
        self.last_error = None
        self.result_tree.clear()

        mti_item = QTreeWidgetItem(["MTI", "", "", result.mti])
        self.result_tree.addTopLevelItem(mti_item)
        bitmap_item = QTreeWidgetItem(["Bitmap", "", "", " ".join(str(f) for f in result.bitmap)])
        self.result_tree.addTopLevelItem(bitmap_item)

        for f in result.fields.values():
            item = QTreeWidgetItem([str(f.id), f.name, str(f.length), f.value])
            for sub in f.subfields or ():
                item.addChild(QTreeWidgetItem([f"Tag {sub.tag}", "", str(sub.length), sub.value]))
            for tag in f.emv_tags or ():
                item.addChild(self._icc_item(tag))
            self.result_tree.addTopLevelItem(item)
        self.result_tree.expandAll()

        self.output_text.setStyleSheet("")
        self.output_text.setPlainText(render_text(result))
        self.statusBar().showMessage(f"MTI {result.mti}, {len(result.fields)} fields")

    def _icc_item(self, tag) -> QTreeWidgetItem:
        item = QTreeWidgetItem([tag.tag, tag.name, str(tag.length), tag.value])
        for child in tag.children:
            item.addChild(self._icc_item(child))
        return item

    def show_error(self, message: str):
        self.result = None
        self.last_error = message
        self.result_tree.clear()
        self.output_text.setStyleSheet("color: red;")
        self.output_text.setPlainText(f"Error parsing message: {message}")
        self.statusBar().showMessage("Parse failed")

    def clear(self):
        self.message_edit.clear()
        self.result_tree.clear()
        self.output_text.clear()
        self.result = None
        self.last_error = None


def main():
    """Main entry point for the application."""
    app = QApplication(sys.argv)
    app.setApplicationName("ISO8583 Viewer")
    app.setApplicationVersion("1.0.0")

    window = ISOMainWindow()
    window.show()

    # Pre-fill the message when given on the command line
    if len(sys.argv) > 1:
        window.message_edit.setPlainText(sys.argv[1])
        window.parse_message()

    sys.exit(app.exec())


if __name__ == "__main__":
    main()
