"""Abstract base class for email providers"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, Optional


class ProviderNotImplementedError(Exception):
    """Provider is selectable in the configuration but has no backend yet"""


@dataclass
class EmailMessage:
    """A rendered email ready to hand to a provider"""
    to: str
    to_name: str
    subject: str
    html_body: str
    text_body: str
    reply_to: Optional[str] = None


@dataclass
class SendResult:
    """Uniform outcome of a send, whatever the backend"""
    success: bool
    message_id: Optional[str] = None
    error: Optional[str] = None
    provider: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        result = {"success": self.success}
        if self.message_id:
            result["message_id"] = self.message_id
        if self.error:
            result["error"] = self.error
        return result


class EmailProvider(ABC):
    """Interface contract for email backends.

    Each backend sends a single message using the sender details and
    credentials from the email configuration.
    """

    name: str = ""

    @abstractmethod
    def send(self, config: Dict[str, Any], message: EmailMessage) -> SendResult:
        """Send one message.

        Args:
            config: Decrypted email configuration
            message: Rendered message; `to` is already the final recipient

        Returns:
            SendResult with the provider's message id on success

        Raises:
            Exception: Transport or provider errors; the caller converts
                them into a failed SendResult
        """
        pass

    @staticmethod
    def sender(config: Dict[str, Any]) -> str:
        """Formatted From header: "Name <address>" """
        from_name = config.get("from_name")
        from_email = config.get("from_email", "")
        return f"{from_name} <{from_email}>" if from_name else from_email

    @staticmethod
    def reply_to(config: Dict[str, Any], message: EmailMessage) -> Optional[str]:
        return message.reply_to or config.get("reply_to") or None
