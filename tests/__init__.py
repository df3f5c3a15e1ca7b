"""Test suite for the transaction list sync engine and development server."""
