"""
Care Payroll Engine - work log approval, caregiver pay and receipts.

Turns recorded caregiving work intervals into payroll entries:
holiday, weekend and shadow-day rate tiers, expense totals, payment
tracking, and PDF/CSV receipts.
"""

__version__ = "0.1.0"
