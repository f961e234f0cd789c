# src/gps_signal_report/io/schema.py
from __future__ import annotations


# Positional columns of the uploaded GPS export (row 1 is a header and skipped)
INPUT_COLUMNS = ("license_plate", "date_str", "address")

# Header of the lost-signal table in the generated sheet
LOST_TABLE_HEADER = ("number", "license_plate", "date", "Address", "delay/days")

LIVE_SECTION_TITLE = "GPS Live Signal"
LOST_SECTION_TITLE = "GPS Lost Signal"
RECIPIENT_PREFIX = "To:- "

SUMMARY_TEMPLATE = (
    "Total= Live GPS Vehicles {recent} And {lost} Vehicle are Lost GPS Signal == {total}"
)
