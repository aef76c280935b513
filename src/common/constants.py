"""
Shared constants for the project.

Defaults for the partner catalog (Product Advertising API 5) and the
notification channel. ``config/catalog.yaml`` overrides these per deployment;
the values here keep the code runnable without it.
"""

# Partner catalog endpoint (Amazon Egypt marketplace)
CATALOG_HOST = "webservices.amazon.eg"
CATALOG_REGION = "eu-west-1"
CATALOG_SERVICE = "ProductAdvertisingAPI"
CATALOG_PATH = "/paapi5/getitems"
CATALOG_TARGET = "com.amazon.paapi5.v1.ProductAdvertisingAPIv1.GetItems"
CATALOG_MARKETPLACE = "www.amazon.eg"
PARTNER_TYPE = "Associates"

CONTENT_ENCODING = "amz-1.0"
CONTENT_TYPE = "application/json; charset=utf-8"

# Resources requested for a single-item lookup (full product card)
ITEM_RESOURCES = [
    "Images.Primary.HighRes",
    "Images.Primary.Large",
    "Images.Variants.HighRes",
    "Images.Variants.Large",
    "ItemInfo.Title",
    "ItemInfo.Features",
    "ItemInfo.Classifications",
    "ItemInfo.ByLineInfo",
    "OffersV2.Listings.Price",
    "Offers.Listings.SavingBasis",
    "CustomerReviews.Count",
    "CustomerReviews.StarRating",
]
ITEM_LANGUAGES = ["ar_AE"]

# Resources requested by the batch price refresh (price only, plus display fields)
BATCH_RESOURCES = [
    "Images.Primary.HighRes",
    "ItemInfo.Title",
    "OffersV2.Listings.Price",
]

# Stale products selected per tenant per run
BATCH_SIZE = 20

# GetItems accepts at most 10 ItemIds per request
MAX_ITEMS_PER_REQUEST = 10

# Telegram
TELEGRAM_API_URL = "https://api.telegram.org"
CAPTION_MAX_LENGTH = 1024
NOTIFY_TIMEZONE = "Africa/Cairo"
