"""
Orchestration commands.

Commands for mutating orchestration instances.
"""
from dataclasses import dataclass, field
from typing import Dict, Optional, Union


@dataclass
class RequestIdentity:
    """Who is calling, as seen by the transport."""

    principal: Optional[str] = None
    headers: Dict[str, str] = field(default_factory=dict)


@dataclass
class OrchestrationActionCommand:
    """
    Command to run one mutating action against an instance.

    body is the request body as received; bytes are decoded as UTF-8
    only after the identity and mode checks.
    """

    instance_id: str
    action: str
    body: Union[str, bytes] = ""
    identity: RequestIdentity = field(default_factory=RequestIdentity)


@dataclass
class ActionResult:
    """Outcome of a successful action."""

    instance_id: str
    action: str
    new_instance_id: Optional[str] = None
