from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class _CamelModel(BaseModel):
    # JSON bodies use camelCase (journalEntries, anomaliesDetected, ...)
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class LedgerSyncResult(_CamelModel):
    accounts: int
    journal_entries: int


class BankSyncResult(_CamelModel):
    accounts: int
    transactions: int


class AnomalyCheckResult(_CamelModel):
    anomalies_detected: int


class FullSyncResult(_CamelModel):
    general_ledger: LedgerSyncResult
    bank_transactions: BankSyncResult
    anomalies: AnomalyCheckResult


class QueryRequest(BaseModel):
    text: str | None = None
