"""
Domain constants used across services/routers.
"""

# Gateway signature message: "<order_id>|<payment_id>"
SIGNATURE_SEPARATOR = "|"

# Minor units per major unit (₹1 = 100 paise)
MINOR_UNITS_PER_MAJOR = 100

# Razorpay caps receipts at 40 characters
RECEIPT_PREFIX = "order_rcptid_"
RECEIPT_MAX_LENGTH = 40

# Order purposes persisted on the ledger
PURPOSE_CHECKOUT = "checkout"
PURPOSE_DONATION = "donation"
PURPOSE_TRAVEL = "travel"
