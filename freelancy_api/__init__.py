"""Freelancy API: job postings and accepted tasks behind an ownership gateway."""
