"""Default settings for sitemigrator.

Everything here can be overridden per run through an options file or CLI
flags (see ``sitemigrator.config``).  Template-specific markup patterns do not
live here; they belong to ``sitemigrator.extractors``.
"""

from __future__ import annotations

# ---------------------------------------------------------------------------
# Project identity
# ---------------------------------------------------------------------------
SITE_NAME = "MyAlarm Security"

# ---------------------------------------------------------------------------
# Source mirror layout
# ---------------------------------------------------------------------------
SITE_DIR = "./old_site"

SOURCE_DIRS = {
    "pages": "pages",
    "blog": "blog",
    "products": "products",
    "categories": "categories",
}

HOME_FILE = "index.html"
CONTACT_FILE = "contact.php.html"
REVIEWS_FILE = "reviews.php.html"

# Suffixes stripped from source filenames to derive slugs, longest first.
SOURCE_SUFFIXES = (".php.html", ".html")

# ---------------------------------------------------------------------------
# Output layout
# ---------------------------------------------------------------------------
OUTPUT_DIR = "./output"

OUTPUT_DIRS = {
    "pages": "pages",
    "news": "news",
    "products": "products",
    "categories": "categories",
    "reviews": "reviews",
}

IMAGES_DIR = "images"
IMAGES_WEB_ROOT = "/images"
FAVICON_DIR = "assets/favicon"
HOME_DATA_FILE = "_data/home_content.json"
JSON_EXPORT_FILE = "content.json"

FORMAT_VERSION = "1.0"

# ---------------------------------------------------------------------------
# Conversion
# ---------------------------------------------------------------------------
# "pandoc" shells out to the pandoc binary; "markdownify" converts in-process.
CONVERTER = "pandoc"
PANDOC_ARGS = ("-f", "html", "-t", "markdown", "--wrap=none")

DEFAULT_DATE = "2020-01-01"

# ---------------------------------------------------------------------------
# Images
# ---------------------------------------------------------------------------
CDN_HOST = "res.cloudinary.com"
CDN_TRANSFORM_SEGMENT = "/f_auto,q_auto/"
BROKEN_UPLOAD_URL = "https://res.cloudinary.com/kbs/image/upload/"
DEFAULT_IMAGE_EXT = "webp"
IMAGE_TIMEOUT = 30
IMAGE_USER_AGENT = "sitemigrator/0.1 (+static site import)"

# ---------------------------------------------------------------------------
# Front matter
# ---------------------------------------------------------------------------
DEFAULT_PAGE_LAYOUT = "page"

# Slugs published at /<slug>/ rather than /pages/<slug>/.
ROOT_PAGES = frozenset({"contact", "reviews"})

PAGE_CONFIG: dict[str, dict] = {
    "about-us": {"nav_key": "About", "nav_order": 2},
    "contact": {"layout": "contact.html", "nav_key": "Contact", "nav_order": 99},
    "reviews": {"layout": "reviews.html", "nav_key": "Reviews", "nav_order": 98},
}

# Curated display order; anything missing falls back to the category scan rank.
PRODUCT_ORDER: dict[str, int] = {
    "basic-system-539": 1,
    "standard-system-599": 2,
    "pet-package-849": 3,
    "cctv-package-1-999": 4,
    "cctv-package-2-1199-24hr-colour-cctv": 5,
    "ultimate-package-cctv-intruder-alarm-system-1549": 6,
    "supreme-package-24hr-colour-cctv-plus-intruder-alarm-system-1749": 7,
    "servicing-and-repairs": 99,
}
DEFAULT_PRODUCT_ORDER = 50

CATEGORIES_IN_NAVIGATION = False
CATEGORY_NAV_ORDER_BASE = 20

REVIEW_RATING = 5

# ---------------------------------------------------------------------------
# Post-processing
# ---------------------------------------------------------------------------
FIND_REPLACE: tuple[tuple[str, str], ...] = (
    (".php.html", "/"),
    ("Cctv", "CCTV"),
    ("My Alarm Security", "MyAlarm Security"),
)

HOME_FEATURE_ICONS = (
    "/assets/icons/fully-certified-engineers.svg",
    "/assets/icons/24-7-service.svg",
    "/assets/icons/shield.svg",
    "/assets/icons/tools.svg",
)

# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------
LOG_LEVEL = "INFO"
LOG_FORMAT = "%(asctime)s [%(name)s] %(levelname)s: %(message)s"
