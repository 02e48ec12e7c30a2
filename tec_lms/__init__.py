"""Bilingual (Khmer/English) content resolution and locale formatting for the TEC LMS."""
