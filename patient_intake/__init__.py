"""
Patient contact CSV intake: upload validation, editable records, CRM sync staging.
"""

__version__ = "0.1.0"
