"""CredentialProvider backed by the settings module."""

import logging

from trackercli.domain.errors import CredentialError
from trackercli.domain.interfaces.credentials import CredentialProvider
from trackercli.domain.models.common import ApiKey
from trackercli.domain.models.tracker import RequestData
from trackercli.infrastructure.config.settings import get_api_key

logger = logging.getLogger(__name__)


class SettingsCredentialProvider(CredentialProvider):
    """Reads API keys from environment / .env / YAML settings.

    An explicit `RequestData.api_key` wins; otherwise the key is read from the
    setting named by `credential_ref`, defaulting to '<indexer>_api_key'.
    """

    def get_api_key(self, request_data: RequestData) -> ApiKey:
        if request_data.api_key:
            return ApiKey(request_data.api_key)

        reference = request_data.credential_ref or f"{request_data.indexer}_api_key"
        api_key = get_api_key(reference)
        if not api_key or not api_key.strip():
            logger.error(f"No API key configured for {request_data.indexer} (setting '{reference}')")
            raise CredentialError(f"no API key found for indexer {request_data.indexer} (setting '{reference}')")
        return ApiKey(api_key.strip())
