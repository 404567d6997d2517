# media_ops/production/workflows/delivery_sections.py
import logging

from ..api_client import ApiError
from ..sections import DEFAULT_PAGE_FLAGS, SectionConfig, move_section, toggle_visibility

logger = logging.getLogger(__name__)


class DeliverySectionEditor:
    """
    Edits the section order and visibility of one job's delivery page.
    Nothing is sent until ``save`` is called.
    """

    def __init__(self, api, job_card_id, cache=None):
        self.api = api
        self.job_card_id = job_card_id
        self.cache = cache
        self.config = SectionConfig.default()
        self.has_record = False

    @property
    def cache_key(self):
        return f'/api/jobs/{self.job_card_id}/delivery-settings'

    def load(self):
        def fetch():
            return self.api.get_delivery_settings(self.job_card_id)

        settings = self.cache.get_or_fetch(self.cache_key, fetch) if self.cache else fetch()
        self.has_record = settings is not None
        # A job without a record yet shows the defaults
        self.config = SectionConfig.from_json(settings)
        return self.config

    def move(self, index, direction):
        self.config.order = move_section(self.config.order, index, direction)
        return self.config.order

    def toggle(self, key):
        self.config.visibility = toggle_visibility(self.config.visibility, key)
        return self.config.visibility

    def reset(self):
        self.config = SectionConfig.default()
        return self.config

    def visible(self):
        return self.config.visible()

    def save(self):
        """Creates the record on first save, updates it afterwards."""
        payload = self.config.to_json()
        try:
            if self.has_record:
                saved = self.api.update_delivery_settings(self.job_card_id, payload)
            else:
                saved = self.api.create_delivery_settings(
                    self.job_card_id, {'jobCardId': self.job_card_id, **DEFAULT_PAGE_FLAGS, **payload}
                )
        except ApiError as e:
            logger.warning("Saving sections for job card %s failed: %s", self.job_card_id, e.message)
            raise

        self.has_record = True
        if self.cache:
            self.cache.invalidate(self.cache_key)
        return saved
