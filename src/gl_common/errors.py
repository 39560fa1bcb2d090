"""Unified error codes and custom exceptions.

Error code ranges:
  1xxx: Group
  2xxx: Snapshot / balance data
  9xxx: System
"""


class AppError(Exception):
    """Base application error."""

    def __init__(
        self,
        code: int,
        message: str,
        http_status: int = 500,
    ) -> None:
        self.code = code
        self.message = message
        self.http_status = http_status
        super().__init__(message)


# --- 1xxx: Group ---

class GroupNotFoundError(AppError):
    def __init__(self, group_id: str) -> None:
        super().__init__(1001, f"Group not found: {group_id}", 404)


# --- 2xxx: Snapshot ---

class MalformedSnapshotError(AppError):
    def __init__(self, group_id: str, anomalies: list[str]) -> None:
        self.anomalies = anomalies
        super().__init__(
            2001,
            f"Malformed expense data in group {group_id}: {len(anomalies)} anomalies "
            f"(first: {anomalies[0] if anomalies else 'n/a'})",
            422,
        )


# --- 9xxx: System ---

class StoreUnavailableError(AppError):
    def __init__(self, detail: str = "Expense store unavailable") -> None:
        super().__init__(9003, detail, 503)
