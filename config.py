"""
Coverage Area Finder configuration.

API endpoints, rate limits, UI defaults, and logging settings.
"""

import os

from dotenv import load_dotenv

load_dotenv()

# --- Overpass API ---
OVERPASS_URLS = [
    url.strip()
    for url in os.getenv(
        "OVERPASS_URLS",
        "https://overpass-api.de/api/interpreter,https://overpass.kumi.systems/api/interpreter",
    ).split(",")
    if url.strip()
]
OVERPASS_TIMEOUT = int(os.getenv("OVERPASS_TIMEOUT", "25"))  # seconds, server side

# --- Firecrawl scraping backend ---
FIRECRAWL_API_URL = os.getenv("FIRECRAWL_API_URL", "https://api.firecrawl.dev")
SCRAPE_TIMEOUT = int(os.getenv("SCRAPE_TIMEOUT", "60"))  # seconds
SCRAPE_MIN_INTERVAL_S = float(os.getenv("SCRAPE_MIN_INTERVAL_S", "2.0"))
ENRICHMENT_PAUSE_S = float(os.getenv("ENRICHMENT_PAUSE_S", "1.0"))
COVERAGE_WAIT_FOR_MS = 3000  # let the checker page render client side
ADDRESS_WAIT_FOR_MS = 2000
CREDENTIAL_TEST_URL = "https://example.com"

# --- Open Fiber coverage checker ---
OPEN_FIBER_URL = "https://openfiber.it/verifica-copertura/"

# --- Google deep links and address fallback ---
GOOGLE_SEARCH_URL = "https://www.google.com/search"
GOOGLE_MAPS_LINK_URL = "https://maps.google.com/"
GOOGLE_MAPS_SEARCH_URL = "https://www.google.com/maps/search/"
GOOGLE_MAPS_PLACE_URL = "https://www.google.com/maps/place/"

# --- Browser storage ---
CREDENTIAL_STORAGE_KEY = "firecrawl_api_key"

# --- UI defaults (Rome) ---
DEFAULT_COORDINATES = "41.9028, 12.4964"
DEFAULT_HEIGHT_M = "30"

# --- Logging ---
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
