"""Jale: job matching, chat assistance and interview scheduling for skilled trades."""

__version__ = "0.1.0"
