"""Application-wide constants and configuration defaults.

Centralizes magic numbers so pages, checkout and the verification proxy
agree on the same values.
"""

# ============== CART STORAGE ==============
CART_STORAGE_KEY = "simple_cart_v1"
CART_EXPIRY_SECONDS = 30 * 24 * 60 * 60  # 30 days, mirrors browser storage lifetime
CART_COOKIE_NAME = "cart_id"
CART_COOKIE_MAX_AGE = 60 * 60 * 24 * 30

# ============== MONEY ==============
DEFAULT_CURRENCY = "NGN"
DEFAULT_CURRENCY_SYMBOL = "₦"  # naira
MINOR_UNITS_PER_MAJOR = 100  # kobo
DELIVERY_FEE = 500  # fixed fee applied on the checkout page
DEFAULT_OPTIONAL_DELIVERY_FEE = 500  # prefilled amount for the cart toggles

# ============== PAYMENT ==============
PAYSTACK_BASE_URL = "https://api.paystack.co"
REFERENCE_PREFIX = "ORDER-"
CONFIRMATION_URL = "/thank-you"

# ============== USER-FACING MESSAGES ==============
MSG_EMAIL_REQUIRED = "Please enter your email before continuing."
MSG_WIDGET_CLOSED = "Payment window closed."
MSG_NOT_VERIFIED = "Payment could not be verified. Please contact support."
MSG_NETWORK_ERROR = "Network error verifying payment."
MSG_NO_REFERENCE = "No reference supplied"
MSG_NOT_CONFIGURED = "Payment verification is not configured"
MSG_CLEAR_CONFIRM = "Clear the entire cart?"
