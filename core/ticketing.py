"""Ticket id generation.

Ticket ids keep the human readable ``METRO-#####`` shape but come from a
monotonic counter, so two tickets issued by the same dashboard never share an
id.
"""

from __future__ import annotations

from dataclasses import dataclass

from .config import DashboardConfig, DEFAULT_CONFIG


@dataclass
class TicketIdGenerator:
    """Monotonic ticket id source.

    Attributes:
        prefix: Text before the dash.
        digits: Zero-padded width of the counter.
        next_number: Number used for the next ticket.
    """

    prefix: str = DEFAULT_CONFIG.ticket_prefix
    digits: int = DEFAULT_CONFIG.ticket_digits
    next_number: int = 1

    @classmethod
    def from_config(cls, config: DashboardConfig) -> TicketIdGenerator:
        return cls(prefix=config.ticket_prefix, digits=config.ticket_digits)

    def next_id(self) -> str:
        """Issue the next ticket id."""
        ticket_id = f"{self.prefix}-{self.next_number:0{self.digits}d}"
        self.next_number += 1
        return ticket_id

    def peek(self) -> str:
        """The id the next call to ``next_id`` will return."""
        return f"{self.prefix}-{self.next_number:0{self.digits}d}"
