import os

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

# Worker can clock in no earlier than this many minutes before the shift starts
EARLY_CLOCK_IN_BUFFER = int(os.getenv("EARLY_CLOCK_IN_BUFFER", "10"))

# Clock-out opens this many minutes before the shift's finish instant
MINIMUM_CLOCK_OUT_BUFFER = int(os.getenv("MINIMUM_CLOCK_OUT_BUFFER", "120"))

# Pagination bounds for shift listings
DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 1000
