"""
HR Portal

Employee records, leave management, timesheets, project tracking,
notifications and document storage exposed as typed remote procedures
for the single-page client.
"""

__version__ = "1.0.0"
