"""Root conftest — shared test configuration."""

import os

# Ensure tests don't accidentally use real API keys
os.environ.setdefault("STRIPE_API_KEY", "sk_test_fake_key")
os.environ.setdefault("STRIPE_ENDPOINT", "https://api.stripe.test")
os.environ.setdefault("STRIPE_FILE_UPLOAD_ENDPOINT", "https://uploads.stripe.test")
