"""Negative cases scenario: error handling of the API.

Bad credentials, missing fields, unauthenticated access, unknown IDs and
invalid data. Some cases are informational: the API contract does not say
whether the request must be rejected, so both outcomes are logged.
"""

NAME = "negative_cases"
TITLE = "Scenario 3: Negative cases and error handling"
DESCRIPTION = "Invalid credentials, missing resources and invalid data"
ORDER = 3
TIMEOUT_S = 300
TOTAL_TESTS = 12
