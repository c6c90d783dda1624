"""Pytest configuration and fixtures."""

import os

# Settings are read at import time, so the environment must be in place first
os.environ["QBO_CLIENT_SECRET"] = "qbo-test-secret"
os.environ["SLACK_VERIFICATION_TOKEN"] = "slack-test-token"
os.environ["SLACK_WEBHOOK_URL"] = "https://hooks.slack.test/services/T000/B000/XXX"
os.environ["PLAID_ACCESS_TOKEN"] = "access-sandbox-test"
os.environ["TIMEZONE"] = "UTC"

import pytest  # noqa: E402

from tests.fakes import FakeNotifier, FakePlaid, FakeQuickBooks, FakeStore  # noqa: E402


@pytest.fixture
def store():
    return FakeStore()


@pytest.fixture
def notifier():
    return FakeNotifier()


@pytest.fixture
def qbo_accounts():
    return [
        {
            "Id": "1",
            "Name": "Checking",
            "AccountType": "Bank",
            "AccountSubType": "Checking",
            "FullyQualifiedName": "Checking",
            "Active": True,
            "CurrentBalance": 1520.75,
        },
        {
            "Id": "33",
            "Name": "Office Supplies",
            "AccountType": "Expense",
            "AccountSubType": "OfficeGeneralAdministrativeExpenses",
            "FullyQualifiedName": "Expenses:Office Supplies",
            "Active": True,
            "CurrentBalance": 0,
        },
    ]


@pytest.fixture
def qbo_entries():
    return [
        {
            "Id": "101",
            "TxnDate": "2026-09-30",
            "DocNumber": "JE-101",
            "PrivateNote": "Month-end accrual",
            "Line": [
                {
                    "Id": "0",
                    "Description": "Supplies accrual",
                    "Amount": 250.0,
                    "DetailType": "JournalEntryLineDetail",
                    "JournalEntryLineDetail": {
                        "PostingType": "Debit",
                        "AccountRef": {"value": "33", "name": "Office Supplies"},
                    },
                },
                {
                    "Id": "1",
                    "Description": "Supplies accrual",
                    "Amount": 250.0,
                    "DetailType": "JournalEntryLineDetail",
                    "JournalEntryLineDetail": {
                        "PostingType": "Credit",
                        "AccountRef": {"value": "1", "name": "Checking"},
                    },
                },
            ],
        },
        {
            "Id": "102",
            "TxnDate": "2026-10-01",
            "DocNumber": "JE-102",
        },
    ]


@pytest.fixture
def qbo(qbo_accounts, qbo_entries):
    return FakeQuickBooks(accounts=qbo_accounts, entries=qbo_entries)


@pytest.fixture
def plaid_client():
    return FakePlaid.sample()
