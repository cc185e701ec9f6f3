"""
Error codes for the IEXTP decoder.

Structured error codes for machine-parseable failures.

Format: E{category}{number}
- E1xxx: Data errors
- E2xxx: Dispatch notices
- E3xxx: Configuration errors
"""

from enum import Enum
from typing import Optional


class ErrorCode(Enum):
    """Structured error codes."""

    # E1xxx: Data errors
    E1001_TRUNCATED_BUFFER = "E1001"
    E1002_TRUNCATED_SEGMENT = "E1002"
    E1003_MALFORMED_NUMERIC = "E1003"
    E1004_UNKNOWN_PROTOCOL = "E1004"

    # E2xxx: Dispatch notices (never raised)
    E2001_UNRECOGNIZED_TYPE = "E2001"

    # E3xxx: Configuration errors
    E3001_INVALID_CONFIG = "E3001"


# Error code metadata
ERROR_METADATA = {
    ErrorCode.E1001_TRUNCATED_BUFFER: {
        'severity': 'error',
        'message': 'Buffer shorter than the required length',
        'recoverable': True,
    },
    ErrorCode.E1002_TRUNCATED_SEGMENT: {
        'severity': 'error',
        'message': 'Segment ended before its declared message count',
        'recoverable': True,
    },
    ErrorCode.E1003_MALFORMED_NUMERIC: {
        'severity': 'error',
        'message': 'Numeric field out of range',
        'recoverable': True,
    },
    ErrorCode.E1004_UNKNOWN_PROTOCOL: {
        'severity': 'error',
        'message': 'Unknown message protocol id',
        'recoverable': False,
    },
    ErrorCode.E2001_UNRECOGNIZED_TYPE: {
        'severity': 'info',
        'message': 'Unrecognized message type, kept as raw bytes',
        'recoverable': True,
    },
    ErrorCode.E3001_INVALID_CONFIG: {
        'severity': 'error',
        'message': 'Invalid configuration',
        'recoverable': False,
    },
}


class IEXTPError(Exception):
    """
    Base class for decoder failures.

    Example:
        try:
            decode_message(Feed.TOPS, data)
        except IEXTPError as e:
            log.error(e.to_dict())
    """

    code: ErrorCode = ErrorCode.E1001_TRUNCATED_BUFFER

    def __init__(self, detail: str = '', context: Optional[dict] = None):
        self.detail = detail
        self.context = context
        super().__init__(self.message)

    @property
    def severity(self) -> str:
        return ERROR_METADATA.get(self.code, {}).get('severity', 'error')

    @property
    def message(self) -> str:
        base_msg = ERROR_METADATA.get(self.code, {}).get('message', 'Unknown error')
        if self.detail:
            return f"{base_msg}: {self.detail}"
        return base_msg

    @property
    def recoverable(self) -> bool:
        return ERROR_METADATA.get(self.code, {}).get('recoverable', False)

    def to_dict(self) -> dict:
        return {
            'code': self.code.value,
            'severity': self.severity,
            'message': self.message,
            'recoverable': self.recoverable,
            'context': self.context,
        }


class TruncatedBufferError(IEXTPError, ValueError):
    """Input shorter than the minimum length of the identified type."""

    code = ErrorCode.E1001_TRUNCATED_BUFFER

    def __init__(self, what: str, required: int, actual: int):
        self.what = what
        self.required = required
        self.actual = actual
        super().__init__(
            f"{what} too small: {actual} < {required}",
            context={'what': what, 'required': required, 'actual': actual},
        )


class TruncatedSegmentError(TruncatedBufferError):
    """Segment payload ran out before message_count blocks were read."""

    code = ErrorCode.E1002_TRUNCATED_SEGMENT

    def __init__(self, decoded: int, expected: int, required: int, available: int):
        self.decoded = decoded
        self.expected = expected
        super().__init__(
            f"segment payload (message {decoded + 1} of {expected})",
            required=required,
            actual=available,
        )
        self.context.update({'decoded': decoded, 'expected': expected})


class MalformedNumericError(IEXTPError, ValueError):
    """Structurally present value that is semantically invalid. Reserved."""

    code = ErrorCode.E1003_MALFORMED_NUMERIC


class UnknownProtocolError(IEXTPError, ValueError):
    """Message protocol id that belongs to neither feed."""

    code = ErrorCode.E1004_UNKNOWN_PROTOCOL

    def __init__(self, protocol_id: int):
        self.protocol_id = protocol_id
        super().__init__(f"0x{protocol_id:04X}", context={'protocol_id': protocol_id})


class ConfigError(IEXTPError, ValueError):
    """Configuration could not be loaded or failed validation."""

    code = ErrorCode.E3001_INVALID_CONFIG
