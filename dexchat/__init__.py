"""Conversational OKX DEX tool for Solana."""
