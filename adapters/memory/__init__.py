"""
메모리 어댑터

ILedgerStore Protocol 참조 구현 (프로세스 내 상태).
"""

from adapters.memory.ledger_store import InMemoryLedgerStore

__all__ = [
    "InMemoryLedgerStore",
]
