"""Request Ledger: requests that are still competing for a slot."""

from typing import Dict, List, Optional

from models import TokenRequest


class RequestLedger:
    """Mapping of request id -> TokenRequest for every active request."""

    def __init__(self):
        self._requests: Dict[str, TokenRequest] = {}

    def submit(self, request: TokenRequest) -> None:
        if request.id in self._requests:
            raise ValueError(f"Request id already in ledger: {request.id}")
        self._requests[request.id] = request

    def remove(self, request_id: str) -> Optional[TokenRequest]:
        """Drop a request. Unknown ids are ignored (returns None)."""
        return self._requests.pop(request_id, None)

    def get(self, request_id: str) -> Optional[TokenRequest]:
        return self._requests.get(request_id)

    def snapshot(self) -> List[TokenRequest]:
        """Copy of the active requests, in submission order."""
        return list(self._requests.values())

    def __contains__(self, request_id: object) -> bool:
        return request_id in self._requests

    def __len__(self) -> int:
        return len(self._requests)
