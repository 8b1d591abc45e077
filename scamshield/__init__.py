"""ScamShield: fraud-risk scoring for job postings."""

__version__ = "1.0.0"
