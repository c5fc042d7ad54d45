"""
MedPanel - PDF medical record dashboard.

Upload PDF medical records, extract vitals and medications, fill the gaps
with placeholder data, and render a static health dashboard.
"""

__version__ = "1.0.0"
