from finsync.models.bank import PlaidAccount, PlaidTransaction
from finsync.models.ledger import QboAccount, QboJournalEntry, QboJournalEntryLine

__all__ = [
    "PlaidAccount",
    "PlaidTransaction",
    "QboAccount",
    "QboJournalEntry",
    "QboJournalEntryLine",
]
