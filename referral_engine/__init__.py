"""
Ambassador referral engine.

Async services, ORM models and repositories for the dispensary ambassador
program: commission accrual and reversal, the balance ledger and payouts.
"""
