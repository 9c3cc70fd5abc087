"""
ISO8583 Viewer - A desktop application for decoding ISO8583 messages.

This is the main entry point for the application.
"""
import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
from iso8583_viewer.ui_main import main

if __name__ == "__main__":
    main()
