"""hotelprobe: end-to-end test harness for the hotel management API.

Drives a running server through ordered business scenarios (reservation
flow, inventory management, negative cases), records every case in
results.json and renders a markdown summary.

Usage:
    python -m hotelprobe list                 # Show scenarios
    python -m hotelprobe run --all            # Run every scenario in order
    python -m hotelprobe report               # Summarize the latest run
"""

__version__ = "0.1.0"
