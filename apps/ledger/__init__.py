"""
Ledger App - group-scoped categories and transactions.

Every category and transaction belongs to a ledger group and is deleted
together with it. New groups receive a default set of categories.
"""
