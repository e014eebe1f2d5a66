"""Account balances with a free part and a reserved part that can be slashed."""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass
from typing import Hashable

from computechain.frame import DispatchError


class InsufficientBalance(DispatchError):
    """The free balance does not cover the amount to reserve."""


@dataclass
class _Account:
    free: int = 0
    reserved: int = 0


def _check_amount(amount: int) -> int:
    if amount < 0:
        raise ValueError(f"amount cannot be negative: {amount}")
    return amount


class Balances:
    """Free and reserved balances per account."""

    def __init__(self, initial: dict[Hashable, int] | None = None) -> None:
        self._accounts: defaultdict[Hashable, _Account] = defaultdict(_Account)
        for account, amount in (initial or {}).items():
            self.deposit(account, amount)

    def deposit(self, account: Hashable, amount: int) -> None:
        """Add to an account's free balance."""
        self._accounts[account].free += _check_amount(amount)

    def free_balance(self, account: Hashable) -> int:
        entry = self._accounts.get(account)
        return entry.free if entry else 0

    def reserved_balance(self, account: Hashable) -> int:
        entry = self._accounts.get(account)
        return entry.reserved if entry else 0

    def reserve(self, account: Hashable, amount: int) -> None:
        """Move ``amount`` from free to reserved, or raise InsufficientBalance."""
        _check_amount(amount)
        entry = self._accounts[account]
        if entry.free < amount:
            raise InsufficientBalance(f"{account!r}: free {entry.free} < {amount}")
        entry.free -= amount
        entry.reserved += amount

    def unreserve(self, account: Hashable, amount: int) -> int:
        """Move up to ``amount`` back to free; return the part that was not reserved."""
        _check_amount(amount)
        entry = self._accounts[account]
        moved = min(amount, entry.reserved)
        entry.reserved -= moved
        entry.free += moved
        return amount - moved

    def slash_reserved(self, account: Hashable, amount: int) -> tuple[int, int]:
        """Burn up to ``amount`` of reserved funds; return (slashed, not slashed)."""
        _check_amount(amount)
        entry = self._accounts[account]
        slashed = min(amount, entry.reserved)
        entry.reserved -= slashed
        return slashed, amount - slashed