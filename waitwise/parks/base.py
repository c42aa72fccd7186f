from abc import ABC, abstractmethod
from typing import List
from waitwise.models.schemas import RideSnapshot


class BaseWaitTimeProvider(ABC):
    """
    Abstract base class for upstream wait-time providers.
    Add a provider by creating a file in waitwise/parks/ and extending this class.
    Implementations raise UpstreamError for bad statuses and malformed payloads;
    they never report a failure as an empty ride list.
    """
    name: str

    @abstractmethod
    async def fetch_queue_times(self, park_id: int) -> List[RideSnapshot]: ...
