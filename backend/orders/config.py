from django.conf import settings


class OrderSettings:
    """Read-through accessor for the ORDER_SETTINGS dict."""

    DEFAULTS = {
        "RETENTION": "midnight",
        "CATEGORY_REVENUE_RETENTION_DAYS": None,
        "DEFAULT_CANCELLATION_REASON": "No reason provided",
        "DEFAULT_PAGE_SIZE": 20,
    }

    def _get(self, key):
        return getattr(settings, "ORDER_SETTINGS", {}).get(key, self.DEFAULTS[key])

    @property
    def retention(self):
        return self._get("RETENTION")

    @property
    def category_revenue_retention_days(self):
        return self._get("CATEGORY_REVENUE_RETENTION_DAYS")

    @property
    def default_cancellation_reason(self):
        return self._get("DEFAULT_CANCELLATION_REASON")

    @property
    def default_page_size(self):
        return self._get("DEFAULT_PAGE_SIZE")


order_settings = OrderSettings()
