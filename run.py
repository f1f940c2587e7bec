#!/usr/bin/env python3
"""Convenience runner for the training insights report.

Usage:
    python run.py --activities activities.json --excel
"""
from training_insights.main import main

if __name__ == "__main__":
    raise SystemExit(main())
