"""Token vault — OAuth token storage in the OS keychain.

Provides CredentialVault for saving, loading and clearing a profile's
access/refresh tokens, and the CredentialStore backends it writes through.
"""
