"""Inventory management scenario: stock lifecycle.

Create products, register a purchase and a usage, and verify the stock
quantities after each adjustment.
"""

NAME = "inventory_management"
TITLE = "Scenario 2: Inventory management"
DESCRIPTION = "Products, purchases, usages and stock verification"
ORDER = 2
TIMEOUT_S = 300
TOTAL_TESTS = 11
