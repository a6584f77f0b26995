"""Git protocol gateway: request classification, repository resolution and auditing."""

from ._audit import ANONYMOUS, UNKNOWN_ADDRESS, AccessAuditor, AuditEvent, build_event, client_address
from ._operations import RECEIVE_PACK, UPLOAD_PACK, GitOperation, RequestSignals, classify_operation
from ._resolver import RepositoryResolver

__all__ = [
    "ANONYMOUS",
    "RECEIVE_PACK",
    "UNKNOWN_ADDRESS",
    "UPLOAD_PACK",
    "AccessAuditor",
    "AuditEvent",
    "GitOperation",
    "RepositoryResolver",
    "RequestSignals",
    "build_event",
    "classify_operation",
    "client_address",
]
