"""Reservation flow scenario: the main business path end to end.

Authenticate, build a room with properties, register a guest, reserve the
room and check out, then confirm the room state through availability.
"""

NAME = "reservation_flow"
TITLE = "Scenario 1: Complete reservation flow"
DESCRIPTION = "Login, room setup, guest, reservation and checkout"
ORDER = 1
TIMEOUT_S = 300
TOTAL_TESTS = 13
