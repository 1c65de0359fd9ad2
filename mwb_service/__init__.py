"""Weekly meeting workbook program scraper service."""
