"""Interface for API key lookup."""

import abc

from ..models.common import ApiKey
from ..models.tracker import RequestData


class CredentialProvider(abc.ABC):
    """Resolves the API key to use for a request."""

    @abc.abstractmethod
    def get_api_key(self, request_data: RequestData) -> ApiKey:
        """Returns the API key for `request_data`.

        Raises:
            CredentialError: If no usable key can be found.
        """
        pass
