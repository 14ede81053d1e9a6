"""
Standard type definitions for database models.

Provides consistent types for monetary and rate fields across all models.
"""

from sqlalchemy import DECIMAL

# Standard money type for amounts, balances, commissions
# Precision: 12 digits total, 2 after decimal point
# Suitable for: sale subtotals, commissions, balances, payouts
# Range: up to 9,999,999,999.99
MoneyType = DECIMAL(12, 2)

# Commission rate type (fraction, not percent)
# Precision: 6 digits total, 4 after decimal point
# Suitable for: rates such as 0.0500, 0.0750, 1.0000
RateType = DECIMAL(6, 4)
