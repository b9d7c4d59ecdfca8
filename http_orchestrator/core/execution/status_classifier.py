"""Status classifier for the HTTP orchestrator.

Maps a transport outcome to SUCCESS, RETRYABLE or FATAL. This is the only
place that decides whether a failure is worth retrying.
"""

from http_orchestrator.core.retry_config import AttemptOutcome
from http_orchestrator.models.transport import TransportOutcome

RATE_LIMITED = 429


class StatusClassifier:
    """Classifies transport outcomes for retry decisions.

    Static methods for stateless classification.
    """

    @staticmethod
    def classify_status(status_code: int) -> AttemptOutcome:
        """Classify a received HTTP status code.

        Args:
            status_code: HTTP status code of the response

        Returns:
            AttemptOutcome enum value
        """
        if 200 <= status_code <= 299:
            return AttemptOutcome.SUCCESS

        # Transient server errors
        if 500 <= status_code <= 599:
            return AttemptOutcome.RETRYABLE

        # Rate limiting is the one retryable client error
        if status_code == RATE_LIMITED:
            return AttemptOutcome.RETRYABLE

        # 4xx and anything unexpected (1xx, 3xx, out of range)
        return AttemptOutcome.FATAL

    @staticmethod
    def classify(outcome: TransportOutcome) -> AttemptOutcome:
        """Classify a transport outcome; any transport error is RETRYABLE.

        Args:
            outcome: Result of one transport round trip

        Returns:
            AttemptOutcome enum value
        """
        if outcome.transport_error is not None:
            return AttemptOutcome.RETRYABLE
        return StatusClassifier.classify_status(outcome.status_code)
