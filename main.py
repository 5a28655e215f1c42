#!/usr/bin/env python

"""
Work Timer - Main Entry Point

Desktop companion for the practice management backend: tracks time against
one task at a time and keeps the clock in sync with the server.

Usage:
    python main.py [--task TASK_ID] [--title TITLE] [--case CASE_TITLE]

Configuration:
    WORKTIMER_API_BASE_URL, WORKTIMER_API_TOKEN, WORKTIMER_TENANT_ID
    WORKTIMER_LOG_LEVEL (default: INFO)
"""

import argparse
import logging
import os
import sys

from worktimer.ui import TimerApp


def main():
    """Main entry point"""
    parser = argparse.ArgumentParser(description="Work Timer")
    parser.add_argument("--task", help="Open the timer panel of this task on startup")
    parser.add_argument("--title", help="Task title shown in the timer")
    parser.add_argument("--case", dest="case_title", help="Case title shown in the timer")
    args, _ = parser.parse_known_args()

    logging.basicConfig(
        level=os.getenv("WORKTIMER_LOG_LEVEL", "INFO").upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    app = TimerApp()
    if args.task:
        app.open_task(args.task, args.title, args.case_title)
    return app.run()


if __name__ == "__main__":
    sys.exit(main())
