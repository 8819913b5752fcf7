"""Document Numbering - Sequential invoice and quote numbers from user-configured patterns"""

__version__ = "0.1.0"
