from threading import Lock

from errors import NotFoundError


class ReceiptStore:
    """
    In-memory mapping of receipt id -> reward points. Every read and write goes
    through a single lock so concurrent request threads never observe a partial
    update. Contents live only as long as the process.
    """

    def __init__(self):
        self._points = {}
        self._lock = Lock()

    def put(self, receipt_id: str, points: int):
        with self._lock:
            self._points[receipt_id] = points

    def get(self, receipt_id: str) -> int:
        with self._lock:
            if receipt_id not in self._points:
                raise NotFoundError(f"Error: receipt id not found ({receipt_id})")
            return self._points[receipt_id]

    def __contains__(self, receipt_id) -> bool:
        with self._lock:
            return receipt_id in self._points

    def __len__(self) -> int:
        with self._lock:
            return len(self._points)
