"""Configuration for the referral engine."""
