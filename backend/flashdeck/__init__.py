"""
Application package for the Flashdeck backend.

It exposes subpackages for core utilities, domain models, repositories and the
service layer that implements deck, flashcard, search and activity operations.
"""
