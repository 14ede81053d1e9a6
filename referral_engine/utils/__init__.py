"""Utility helpers for the referral engine."""
