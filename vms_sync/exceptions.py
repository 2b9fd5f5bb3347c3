"""
Exception hierarchy for VMS synchronization.

Cycle-level failures (transport, unparsable payload) abort one vendor's cycle
and are raised to the caller. Record-level problems never reach this module;
the extractors and the transformation engine absorb them.
"""

from typing import Any, Dict, Optional


class VmsSyncError(Exception):
    """Base exception for all synchronization errors"""

    def __init__(
        self,
        message: str,
        vms_type: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.vms_type = vms_type
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        result = {
            "error": self.__class__.__name__,
            "message": self.message,
        }
        if self.vms_type:
            result["vmsType"] = self.vms_type
        if self.details:
            result["details"] = self.details
        return result


class TransportError(VmsSyncError):
    """HTTP call failed, timed out or returned a non-success status"""

    def __init__(
        self,
        message: str,
        vms_type: Optional[str] = None,
        url: Optional[str] = None,
        status_code: Optional[int] = None,
    ):
        super().__init__(
            message=message,
            vms_type=vms_type,
            details={k: v for k, v in (("url", url), ("statusCode", status_code)) if v is not None},
        )
        self.url = url
        self.status_code = status_code


class PayloadParseError(VmsSyncError):
    """The whole vendor response could not be parsed"""

    def __init__(self, message: str, vms_type: Optional[str] = None, raw_payload: Optional[str] = None):
        super().__init__(
            message=message,
            vms_type=vms_type,
            details={"rawPayload": raw_payload[:500]} if raw_payload else None,
        )


class UnknownVmsError(VmsSyncError):
    """VMS type is not registered or has no connection settings"""

    def __init__(self, vms_type: str, reason: str = "not registered"):
        super().__init__(message=f"VMS type {vms_type} {reason}", vms_type=vms_type)


class MappingRuleError(VmsSyncError):
    """Invalid edit of a mapping rule set"""
