#!/usr/bin/env python3
"""TimerWidget entry point.

Run with:
    python main.py
    python -m timerwidget
"""

from timerwidget.__main__ import main


if __name__ == "__main__":
    main()
