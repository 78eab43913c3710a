"""Progress and challenge tracking for Quran reading.

Provides:
- Reading challenges split into day-by-day page ranges
- Habit plans with a per-day checklist
- Cumulative reading goals and a global daily streak
"""
