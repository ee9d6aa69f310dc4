"""
CampusPrep Placement Portal
Placement preparation with AI-generated study content.

Architecture:
- Key-value store: one Database record (users + drives) and one session slot
- SessionAuthenticator: who is signed in, single subscriber
- Content generator: roadmaps, mock tests, interview questions, resume feedback
"""

__version__ = "1.0.0"
