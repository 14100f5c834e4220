"""User interfaces for pdfverify."""
