#!/usr/bin/env python3
"""StudyScrum entry point.

Run with:
    python main.py
    python -m studyscrum
"""

from studyscrum.__main__ import main


if __name__ == "__main__":
    main()
