"""
Wallet - signing credentials for arbtasks.

Uses eth-account for key handling and transaction signing.
"""
